"""
Tests for the height table (measurement feed).
"""

import pytest

from hierarchy import HeightTable


@pytest.fixture
def table():
    return HeightTable(nominal_height=141)


class TestHeightTable:

    def test_unmeasured_node_uses_nominal(self, table):
        assert table.get("anything") == 141
        assert "anything" not in table

    def test_record_is_buffered_until_flush(self, table):
        table.record("a", 200)
        assert table.get("a") == 141
        assert table.flush() is True
        assert table.get("a") == 200

    def test_burst_coalesces_into_one_generation(self, table):
        """Many measurements, one flush, one layout trigger."""
        for h in (150, 170, 190):
            table.record("a", h)
        table.record("b", 300)

        assert table.flush() is True
        assert table.generation == 1
        assert table.get("a") == 190
        assert table.get("b") == 300

    def test_small_changes_ignored(self, table):
        table.record("a", 200)
        table.flush()

        table.record("a", 200.8)
        assert table.flush() is False
        assert table.generation == 1
        assert table.get("a") == 200

    def test_first_measurement_always_stored(self, table):
        """Even a nominal-sized first measurement is recorded."""
        table.record("a", 141)
        assert table.flush() is True
        assert "a" in table

    def test_clamped_to_nominal(self, table):
        table.record("a", 20)
        table.flush()
        assert table.get("a") == 141

    @pytest.mark.parametrize("bad", [0, -5, None, "tall"])
    def test_invalid_measurements_ignored(self, table, bad):
        table.record("a", bad)
        assert table.flush() is False
        assert "a" not in table

    def test_empty_flush(self, table):
        assert table.flush() is False
        assert table.generation == 0

    def test_prune_drops_dead_ids(self, table):
        table.record("a", 200)
        table.record("b", 200)
        table.flush()
        table.record("b", 400)

        table.prune(["a"])
        assert "b" not in table
        assert table.flush() is False
        assert len(table) == 1

    def test_mapping_is_read_only(self, table):
        table.record("a", 200)
        table.flush()
        view = table.as_mapping()
        assert view["a"] == 200
        with pytest.raises(TypeError):
            view["a"] = 1
