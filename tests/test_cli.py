import json

import pytest
from google.api_core.exceptions import ServiceUnavailable

import main
from conftest import FakeSource, make_entity


def test_split_list():
    assert main.split_list(None) is None
    assert main.split_list("") is None
    assert main.split_list("a, b,,c") == ["a", "b", "c"]
    assert main.split_list(" , ") is None


def test_export_kind_command(tmp_path, capsys):
    source = FakeSource(records=[make_entity("users", 1, role="admin")])
    code = main.main(
        ["export-kind", "-p", "proj", "-k", "users", "--out", str(tmp_path)],
        source_factory=lambda project: source,
    )
    assert code == 0
    files = list(tmp_path.glob("export_users_*.json"))
    assert len(files) == 1
    assert json.loads(files[0].read_text()) == [{"role": "admin"}]
    assert "Exported 1 entities" in capsys.readouterr().out


def test_export_kind_csv_command(tmp_path):
    source = FakeSource(records=[make_entity(a=1)])
    code = main.main(
        ["export-kind", "-p", "proj", "-k", "users", "--format", "csv", "--out", str(tmp_path)],
        source_factory=lambda project: source,
    )
    assert code == 0
    assert len(list(tmp_path.glob("export_users_*.csv"))) == 1


def test_export_kind_rejects_unknown_format(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main.main(["export-kind", "-p", "proj", "-k", "users", "--format", "xml"])
    assert excinfo.value.code == 2


def test_export_failure_returns_non_zero(tmp_path):
    source = FakeSource(records=[make_entity(a=1)], fail_at=0, error=ServiceUnavailable("down"))
    code = main.main(
        ["export-kind", "-p", "proj", "-k", "users", "--out", str(tmp_path)],
        source_factory=lambda project: source,
    )
    assert code == 1


def test_delete_all_command(capsys):
    source = FakeSource(keys={("ns", "users"): ["a", "b"]})
    code = main.main(
        ["delete-all", "-p", "proj", "-n", "ns", "-k", "users"],
        source_factory=lambda project: source,
    )
    assert code == 0
    assert source.deleted == [["a", "b"]]
    out = capsys.readouterr().out
    assert "Deleting ns/users ... Keys: 2" in out
    assert "All entities have been successfully deleted!" in out


def test_project_is_passed_to_source_factory(tmp_path):
    seen = []

    def factory(project):
        seen.append(project)
        return FakeSource()

    main.main(["export-kind", "-p", "my-proj", "-k", "users", "--out", str(tmp_path)], source_factory=factory)
    assert seen == ["my-proj"]


def test_invalid_log_level_is_a_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        main.main(["--log-level", "foo", "export-kind", "-p", "proj", "-k", "users"])
    assert excinfo.value.code == 2


def test_log_level_is_case_insensitive(tmp_path):
    code = main.main(
        ["--log-level", "debug", "export-kind", "-p", "proj", "-k", "users", "--out", str(tmp_path)],
        source_factory=lambda project: FakeSource(),
    )
    assert code == 0
