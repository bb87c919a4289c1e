"""단계 전이 정책 테스트"""

import pytest

from src.core.conversation.errors import InvalidStateError
from src.core.conversation.stages import STAGE_ORDER, Stage, advance_one, parse_stage
from src.core.conversation.transition import (
    FORCED_DRAFT_TURNS,
    classify_feedback,
    next_stage,
)

SAMPLE_TEXTS = ["", "   ", "음...", "좋아요", "수정해 주세요", "가" * 120, "나" * 200]


class TestStageModel:
    def test_seven_stages_in_order(self):
        assert [s.value for s in STAGE_ORDER] == [
            "initial",
            "detail_1",
            "detail_2",
            "detail_3",
            "draft",
            "feedback",
            "final",
        ]

    def test_parse_stage_rejects_unknown(self):
        with pytest.raises(InvalidStateError):
            parse_stage("detail_4")

    def test_parse_stage_accepts_value(self):
        assert parse_stage("draft") is Stage.DRAFT

    def test_advance_one_final_is_absorbing(self):
        assert advance_one(Stage.DETAIL_3) is Stage.DRAFT
        assert advance_one(Stage.FINAL) is Stage.FINAL


class TestInitial:
    def test_short_reply_goes_to_detail_1(self):
        assert next_stage(Stage.INITIAL, 1, "0123456789") is Stage.DETAIL_1

    def test_narrative_keyword_skips_to_detail_2(self):
        assert next_stage(Stage.INITIAL, 1, "오늘 있었던 경험을 자세히 이야기하면...") is Stage.DETAIL_2

    def test_long_reply_skips_to_detail_2(self):
        assert next_stage(Stage.INITIAL, 1, "가" * 101) is Stage.DETAIL_2

    def test_exactly_100_chars_is_not_long(self):
        assert next_stage(Stage.INITIAL, 1, "가" * 100) is Stage.DETAIL_1


class TestDetail:
    def test_short_detail_advances_one(self):
        assert next_stage(Stage.DETAIL_1, 3, "비가 왔어요") is Stage.DETAIL_2
        assert next_stage(Stage.DETAIL_2, 5, "엄마가 있었어요") is Stage.DETAIL_3

    def test_long_detail_advances_two(self):
        assert next_stage(Stage.DETAIL_1, 3, "가" * 151) is Stage.DETAIL_3

    def test_long_detail_at_detail_2_reaches_draft(self):
        # detailLevel 2 → min(2 + 2, 3) = 3 → draft
        assert next_stage(Stage.DETAIL_2, 5, "가" * 160) is Stage.DRAFT

    def test_detail_3_always_drafts(self):
        assert next_stage(Stage.DETAIL_3, 7, "네") is Stage.DRAFT

    @pytest.mark.parametrize("text", SAMPLE_TEXTS)
    def test_turn_budget_forces_draft(self, text):
        assert next_stage(Stage.DETAIL_1, FORCED_DRAFT_TURNS, text) is Stage.DRAFT
        assert next_stage(Stage.DETAIL_1, FORCED_DRAFT_TURNS + 5, text) is Stage.DRAFT

    def test_just_below_turn_budget_does_not_force(self):
        assert next_stage(Stage.DETAIL_1, FORCED_DRAFT_TURNS - 1, "네") is Stage.DETAIL_2


class TestDraftFeedbackFinal:
    def test_positive_only_goes_final(self):
        assert next_stage(Stage.DRAFT, 9, "좋아요 완벽해요") is Stage.FINAL

    def test_positive_with_negative_goes_feedback(self):
        assert next_stage(Stage.DRAFT, 9, "좋아요 그런데 결말은 수정해 주세요") is Stage.FEEDBACK

    def test_short_neutral_goes_feedback(self):
        assert next_stage(Stage.DRAFT, 9, "음...") is Stage.FEEDBACK

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_never_goes_final(self, text):
        assert next_stage(Stage.DRAFT, 9, text) is Stage.FEEDBACK

    @pytest.mark.parametrize("text", SAMPLE_TEXTS)
    def test_feedback_always_goes_final(self, text):
        assert next_stage(Stage.FEEDBACK, 10, text) is Stage.FINAL

    def test_final_stays_final(self):
        assert next_stage(Stage.FINAL, 30, "한 번 더요") is Stage.FINAL

    def test_classify_feedback(self):
        assert classify_feedback("최고예요") == (True, False)
        assert classify_feedback("다시 써 주세요") == (False, True)
        assert classify_feedback("   ") == (False, False)


class TestClosure:
    @pytest.mark.parametrize("stage", list(Stage))
    @pytest.mark.parametrize("turn_count", [0, 5, 12, 40])
    def test_result_is_always_a_stage(self, stage, turn_count):
        for text in SAMPLE_TEXTS:
            assert next_stage(stage, turn_count, text) in STAGE_ORDER

    def test_string_stage_accepted(self):
        assert next_stage("feedback", 0, "x") is Stage.FINAL

    def test_unknown_stage_raises(self):
        with pytest.raises(InvalidStateError):
            next_stage("epilogue", 0, "x")
