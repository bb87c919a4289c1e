"""detail 누적 테스트"""

from src.core.conversation.details import detail_key, record_detail
from src.core.conversation.stages import Stage


class TestRecordDetail:
    def test_writes_under_current_detail_key(self):
        assert record_detail({}, Stage.DETAIL_2, "비 오는 골목") == {"detail_2": "비 오는 골목"}

    def test_last_write_wins(self):
        first = record_detail({}, Stage.DETAIL_1, "A")
        second = record_detail(first, Stage.DETAIL_1, "B")
        assert second == {"detail_1": "B"}
        assert "detail_2" not in second and "detail_3" not in second

    def test_other_stages_are_no_op(self):
        existing = {"detail_1": "A"}
        for stage in (Stage.INITIAL, Stage.DRAFT, Stage.FEEDBACK, Stage.FINAL):
            assert record_detail(existing, stage, "무시") == existing

    def test_does_not_mutate_caller_map(self):
        existing = {"detail_1": "A"}
        updated = record_detail(existing, Stage.DETAIL_3, "C")
        assert existing == {"detail_1": "A"}
        assert updated == {"detail_1": "A", "detail_3": "C"}
        assert updated is not existing

    def test_never_deletes_keys(self):
        existing = {"detail_1": "A", "detail_2": "B"}
        assert set(record_detail(existing, Stage.DETAIL_1, "")) == {"detail_1", "detail_2"}

    def test_detail_key(self):
        assert detail_key("detail_3") == "detail_3"
        assert detail_key(Stage.DRAFT) is None
