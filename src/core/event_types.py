"""이벤트 유형 상수

UI에 노출되는 대화 세션 이벤트.
"""


class EventTypes:
    """이벤트 유형 문자열 상수"""

    # response orchestrator / chat session
    STAGE_CHANGED = "stage_changed"
    OFFLINE_MODE_ENTERED = "offline_mode_entered"
    SESSION_RECOVERED = "session_recovered"
    SESSION_RESET = "session_reset"

    # turn/time budget
    TIME_UP = "time_up"
    ENGAGEMENT_MILESTONE = "engagement_milestone"
