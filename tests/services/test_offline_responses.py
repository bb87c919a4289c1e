"""오프라인 응답 카탈로그 테스트"""

import random

import pytest

from src.core.conversation.personas import DirectorPersona
from src.services.offline_responses import (
    OFFLINE_CATALOGUE,
    OfflineBucket,
    bucket_for_turn,
    get_offline_reply,
)


class TestBuckets:
    @pytest.mark.parametrize(
        "turn,bucket",
        [
            (0, OfflineBucket.ANALYZING),
            (3, OfflineBucket.ANALYZING),
            (4, OfflineBucket.DEEPENING),
            (7, OfflineBucket.DEEPENING),
            (8, OfflineBucket.CONCLUDING),
            (40, OfflineBucket.CONCLUDING),
        ],
    )
    def test_bucket_for_turn(self, turn, bucket):
        assert bucket_for_turn(turn) is bucket


class TestCatalogue:
    def test_every_persona_and_bucket_has_replies(self):
        for persona in DirectorPersona:
            for bucket in OfflineBucket:
                replies = OFFLINE_CATALOGUE[persona][bucket]
                assert replies
                for reply in replies:
                    assert reply.message
                    assert len(reply.choices) == 3

    def test_pick_is_within_bucket(self):
        rng = random.Random(3)
        allowed = OFFLINE_CATALOGUE[DirectorPersona.NOLAN][OfflineBucket.DEEPENING]
        for _ in range(10):
            assert get_offline_reply(DirectorPersona.NOLAN, 5, rng) in allowed

    def test_same_seed_same_pick(self):
        first = get_offline_reply(DirectorPersona.DOCTER, 1, random.Random(42))
        second = get_offline_reply(DirectorPersona.DOCTER, 1, random.Random(42))
        assert first == second
