from sprint_report.core import column_config
from sprint_report.core.column_config import get_columns, load_column_sets


def test_column_sets_load():
    sets = load_column_sets()
    assert "assignee" in sets and "status" in sets
    assert isinstance(get_columns("assignee"), list)
    assert get_columns("unknown") == []


def test_column_sets_from_yaml(tmp_path, monkeypatch):
    (tmp_path / "columns.yaml").write_text("sets:\n  assignee: [assignee, completion]\n")
    monkeypatch.setattr(column_config, "_CACHE", None)
    sets = load_column_sets(tmp_path, refresh=True)
    assert sets["assignee"] == ["assignee", "completion"]
    assert sets["status"] == ["status", "count"]
    load_column_sets(refresh=True)
