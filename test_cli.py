import json
import pytest
import requests
from unittest.mock import MagicMock, patch

from kanban_board.cli import main as cli
from kanban_board.cli.api import ApiClient, ApiError
from kanban_board.cli.config import (
    ConfigError,
    GlobalConfig,
    config_dir,
    load_global_config,
    save_global_config
)

COLUMNS = [
    {"id": 11, "project_id": 1, "name": "Backlog", "sort_order": 1000},
    {"id": 12, "project_id": 1, "name": "In Progress", "sort_order": 2000},
    {"id": 13, "project_id": 1, "name": "Done", "sort_order": 3000},
]

LOOKUP = {
    "linked_path": {"id": 5, "project_id": 1, "path": "/work/repo", "hostname": "box", "default_column_id": 12},
    "project_name": "Repo",
}


def make_response(status_code=200, payload=None):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = payload
    response.text = json.dumps(payload)
    return response


class TestConfig:

    def test_config_dir_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("RK_CONFIG_DIR", str(tmp_path))
        assert config_dir() == tmp_path

    def test_config_dir_xdg(self, monkeypatch, tmp_path):
        monkeypatch.delenv("RK_CONFIG_DIR", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert config_dir() == tmp_path / "real-kanban"

    def test_missing_file_gives_empty_config(self, monkeypatch, tmp_path):
        monkeypatch.setenv("RK_CONFIG_DIR", str(tmp_path / "nothing"))
        config = load_global_config()
        assert config.api_url is None
        assert not config.is_configured

    def test_save_and_load(self, monkeypatch, tmp_path):
        monkeypatch.setenv("RK_CONFIG_DIR", str(tmp_path / "rk"))
        save_global_config(GlobalConfig(api_url="http://localhost:30100", api_key="secret"))

        stored = json.loads((tmp_path / "rk" / "config.json").read_text())
        assert stored == {"api_url": "http://localhost:30100", "api_key": "secret"}
        assert load_global_config().is_configured

    def test_corrupt_file_is_config_error(self, monkeypatch, tmp_path):
        monkeypatch.setenv("RK_CONFIG_DIR", str(tmp_path))
        (tmp_path / "config.json").write_text("{not json")

        with pytest.raises(ConfigError):
            load_global_config()


class TestApiClient:

    @pytest.fixture
    def client(self):
        api = ApiClient("http://kanban.local/", "secret")
        api.session = MagicMock()
        return api

    def test_sends_key_header(self):
        api = ApiClient("http://kanban.local", "secret")
        assert api.session.headers["X-API-Key"] == "secret"

    def test_lookup_not_found_is_none(self, client):
        client.session.request.return_value = make_response(404, {"detail": "No linked path found"})

        assert client.lookup_linked_path("/tmp") is None
        method, url = client.session.request.call_args.args
        assert (method, url) == ("GET", "http://kanban.local/api/linked-paths/lookup")

    def test_error_carries_detail(self, client):
        client.session.request.return_value = make_response(409, {"detail": "Tag 'bug' already exists"})

        with pytest.raises(ApiError) as exc_info:
            client.list_projects()

        assert exc_info.value.status == 409
        assert exc_info.value.detail == "Tag 'bug' already exists"

    def test_connection_failure(self, client):
        client.session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ApiError) as exc_info:
            client.list_projects()
        assert exc_info.value.status is None

    def test_from_config_requires_url(self):
        with pytest.raises(ApiError):
            ApiClient.from_config(GlobalConfig(api_key="secret"))


class TestMatching:

    def test_title_match_is_trimmed_and_case_insensitive(self):
        tasks = [{"id": 1, "title": " Fix Login ", "column_id": 11}, {"id": 2, "title": "Other", "column_id": 11}]
        assert cli.find_task_by_title(tasks, "fix login")["id"] == 1

    def test_ambiguous_title(self, capsys):
        tasks = [{"id": 1, "title": "Dup", "column_id": 11}, {"id": 2, "title": "dup", "column_id": 12}]

        with pytest.raises(cli.CliError):
            cli.find_task_by_title(tasks, "DUP")
        assert "Multiple tasks found" in capsys.readouterr().out

    def test_no_title_match(self):
        with pytest.raises(cli.CliError):
            cli.find_task_by_title([], "anything")

    def test_column_by_id_or_name(self):
        assert cli.find_column_by_name_or_id(COLUMNS, "12")["name"] == "In Progress"
        assert cli.find_column_by_name_or_id(COLUMNS, "in progress")["id"] == 12

    def test_unknown_column(self):
        with pytest.raises(cli.CliError):
            cli.find_column_by_name_or_id(COLUMNS, "Review")


class TestCommands:

    @pytest.fixture
    def api(self):
        api = MagicMock(spec=ApiClient)
        api.lookup_linked_path.return_value = LOOKUP
        api.get_project_columns.return_value = COLUMNS
        api.list_tasks.return_value = [{"id": 7, "title": "Ship it", "column_id": 11}]
        with patch.object(cli.ApiClient, "from_config", return_value=api), \
             patch.object(cli, "current_path", return_value="/work/repo/src"), \
             patch.object(cli, "current_hostname", return_value="box"):
            yield api

    def test_init_writes_config(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setenv("RK_CONFIG_DIR", str(tmp_path))

        assert cli.main(["init", "http://localhost:30100", "secret"]) == 0
        assert load_global_config().api_key == "secret"

        assert cli.main(["init", "--url", "http://other:30100"]) == 0
        config = load_global_config()
        assert (config.api_url, config.api_key) == ("http://other:30100", "secret")

    def test_init_without_arguments_fails(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setenv("RK_CONFIG_DIR", str(tmp_path))
        assert cli.main(["init"]) == 1
        assert "Usage: rk init" in capsys.readouterr().err

    def test_add_uses_binding_default_column(self, api):
        api.create_task.return_value = {"id": 8, "title": "New"}

        assert cli.main(["add", "New"]) == 0
        api.lookup_linked_path.assert_called_once_with("/work/repo/src", "box")
        api.create_task.assert_called_once_with(
            project_id=1, title="New", column_id=12, description=None, source_tag="manual"
        )

    def test_add_with_column_name_and_tag(self, api):
        api.create_task.return_value = {"id": 8, "title": "New"}

        assert cli.main(["add", "New", "-c", "done", "-t", "ci"]) == 0
        kwargs = api.create_task.call_args.kwargs
        assert (kwargs["column_id"], kwargs["source_tag"]) == (13, "ci")

    def test_done_moves_to_last_column(self, api):
        assert cli.main(["done", "ship it"]) == 0
        api.move_task.assert_called_once_with(7, 13)

    def test_move_by_column_name(self, api):
        assert cli.main(["move", "Ship it", "-c", "In Progress"]) == 0
        api.move_task.assert_called_once_with(7, 12)

    def test_describe_appends_paragraph(self, api):
        api.get_task.return_value = {"id": 7, "title": "Ship it", "description": "First line"}

        assert cli.main(["describe", "Ship it", "More detail"]) == 0
        api.update_task.assert_called_once_with(7, description="First line\n\nMore detail")

    def test_describe_empty_description(self, api):
        api.get_task.return_value = {"id": 7, "title": "Ship it", "description": None}

        assert cli.main(["describe", "Ship it", "Only text"]) == 0
        api.update_task.assert_called_once_with(7, description="Only text")

    def test_remove_task(self, api):
        assert cli.main(["remove", "Ship it"]) == 0
        api.delete_task.assert_called_once_with(7)

    def test_unlinked_directory(self, api, capsys):
        api.lookup_linked_path.return_value = None

        assert cli.main(["tasks"]) == 1
        assert "Run: rk link <project-id>" in capsys.readouterr().err

    def test_link_current_directory(self, api):
        api.list_projects.return_value = [{"id": 1, "name": "Repo", "sort_order": 1000}]

        assert cli.main(["link", "1", "-c", "12"]) == 0
        api.create_linked_path.assert_called_once_with(
            project_id=1, path="/work/repo/src", hostname="box", default_column_id=12
        )

    def test_link_unknown_project(self, api):
        api.list_projects.return_value = []
        assert cli.main(["link", "9"]) == 1
        api.create_linked_path.assert_not_called()

    def test_api_error_exits_nonzero(self, api, capsys):
        api.list_projects.side_effect = ApiError("GET /projects failed (503): Storage failure", status=503)

        assert cli.main(["projects"]) == 1
        assert "Storage failure" in capsys.readouterr().err

    def test_check_not_configured(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setenv("RK_CONFIG_DIR", str(tmp_path))
        assert cli.main(["check"]) == 1
        assert capsys.readouterr().out.strip() == "not configured"

    def test_corrupt_config_reported_on_stderr(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setenv("RK_CONFIG_DIR", str(tmp_path))
        (tmp_path / "config.json").write_text('{"api_url": 42}')

        assert cli.main(["check"]) == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: Invalid config file")
        assert "rk init" in err
