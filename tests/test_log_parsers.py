import json
from datetime import datetime, timedelta, timezone

from admin_gateway.domain.entities.log_entry import (
    AppLogEntry,
    ErrorLogEntry,
    LogLevel,
    LogService,
    NginxLogEntry,
)
from admin_gateway.utils.log_parsers import (
    normalize_timestamp,
    parse_app_log_line,
    parse_console_log_line,
    parse_error_log_file,
    parse_log_file,
    parse_log_timestamp,
    parse_nginx_log_line,
)
from tests.conftest import utc

NGINX_LINE = (
    '192.168.1.10 - - [02/Jul/2025:02:13:02 -0500] "GET /api/v1/shows HTTP/1.1" 200 512 '
    '"https://example.com/" "Mozilla/5.0"'
)


def _is_recent(value: datetime) -> bool:
    return abs(datetime.now(timezone.utc) - value) < timedelta(seconds=5)


class TestParseAppLogLine:
    def test_parses_request_and_response(self):
        line = json.dumps({
            "timestamp": "2025-01-15T12:00:00Z",
            "message": "Request completed",
            "level": "info",
            "logId": "abc-123",
            "data": {
                "request": {"path": "/api/v1/shows", "method": "GET", "query": {"page": "1"}},
                "response": {"statusCode": 200, "body": {"ok": True}},
            },
        })

        entry = parse_app_log_line(line, LogService.APP, "/var/log/app/app.log")

        assert isinstance(entry, AppLogEntry)
        assert entry.timestamp == utc("2025-01-15T12:00:00Z")
        assert entry.level == LogLevel.INFO
        assert entry.service == "App"
        assert entry.log_id == "abc-123"
        assert entry.log_file == "app.log"
        assert entry.request.url == "/api/v1/shows"
        assert entry.request.query == {"page": "1"}
        assert entry.request.body == {}
        assert entry.response.status_code == 200

    def test_partial_request_gets_defaults(self):
        line = json.dumps({
            "timestamp": "2025-01-15T12:00:00Z",
            "message": "Partial request",
            "data": {"request": {"method": "POST"}},
        })

        entry = parse_app_log_line(line, LogService.APP, "app.log")

        assert entry.request.url == "N/A"
        assert entry.request.method == "POST"
        assert entry.request.params == {}
        assert entry.response is None

    def test_missing_level_is_classified_from_message(self):
        line = json.dumps({"timestamp": "2025-01-15T12:00:00Z", "message": "TypeError: boom"})
        assert parse_app_log_line(line, LogService.APP, "app.log").level == LogLevel.ERROR

    def test_invalid_lines_are_skipped(self):
        assert parse_app_log_line("not json", LogService.APP, "app.log") is None
        assert parse_app_log_line("{}", LogService.APP, "app.log") is None
        assert parse_app_log_line("[1, 2]", LogService.APP, "app.log") is None

    def test_numeric_log_id_is_kept_as_text(self):
        line = json.dumps({"timestamp": "2025-01-15T10:00:00Z", "message": "m", "level": "info", "logId": 42})

        assert parse_app_log_line(line, LogService.APP, "app.log").log_id == "42"

    def test_wrongly_shaped_fields_are_skipped(self):
        params_as_list = json.dumps({
            "timestamp": "2025-01-15T10:00:00Z",
            "message": "m",
            "data": {"request": {"path": "/x", "params": ["id"]}},
        })
        query_as_string = json.dumps({
            "timestamp": "2025-01-15T10:00:00Z",
            "message": "m",
            "data": {"request": {"path": "/x", "query": "page=1"}},
        })

        assert parse_app_log_line(params_as_list, LogService.APP, "app.log") is None
        assert parse_app_log_line(query_as_string, LogService.APP, "app.log") is None


class TestParseNginxLogLine:
    def test_parses_combined_format(self):
        entry = parse_nginx_log_line(NGINX_LINE, "/var/log/nginx/access.log")

        assert isinstance(entry, NginxLogEntry)
        assert entry.service == "nginx"
        assert entry.level == LogLevel.INFO
        assert entry.message == "Request: GET /api/v1/shows HTTP/1.1 >>> Status: 200"
        assert entry.remote_addr == "192.168.1.10"
        assert entry.remote_user == "-"
        assert entry.status == 200
        assert entry.bytes_sent == 512
        assert entry.http_user_agent == "Mozilla/5.0"
        assert entry.gzip_ratio is None
        assert entry.log_file == "access.log"
        assert entry.timestamp == utc("2025-07-02T07:13:02Z")

    def test_invalid_line(self):
        assert parse_nginx_log_line("invalid nginx line", "access.log") is None


class TestParseConsoleLogLine:
    def test_parses_winston_line(self):
        entry = parse_console_log_line(
            "[Jan-15-2025 12:00:00] info (1.0.0): Application started", LogService.CONSOLE, "/pm2/out.log"
        )

        assert entry.level == LogLevel.INFO
        assert entry.message == "Application started"
        assert entry.version == "1.0.0"
        assert entry.service == "Console"
        assert entry.log_file == "out.log"
        assert entry.timestamp == parse_log_timestamp("Jan-15-2025 12:00:00")

    def test_ansi_colour_codes(self):
        entry = parse_console_log_line(
            "[Jan-15-2025 12:00:00] \x1b[32minfo\x1b [0m (1.0.0): Colored message", LogService.CONSOLE, "out.log"
        )
        assert entry.message == "Colored message"

    def test_unknown_level_is_classified_from_message(self):
        entry = parse_console_log_line(
            "[Jan-15-2025 12:00:00] debug (1.0.0): cache warm", LogService.CONSOLE, "out.log"
        )
        assert entry.level == LogLevel.INFO

    def test_invalid_line(self):
        assert parse_console_log_line("invalid console log", LogService.CONSOLE, "out.log") is None


class TestParseErrorLogFile:
    def test_single_error_with_timestamp(self):
        errors = parse_error_log_file("[Jul-03-2025 12:49:28] ERROR: Something went wrong", LogService.APP, "/x/error.log")

        assert len(errors) == 1
        assert isinstance(errors[0], ErrorLogEntry)
        assert errors[0].message == "Something went wrong"
        assert errors[0].level == LogLevel.ERROR
        assert errors[0].stack == []
        assert errors[0].log_file == "error.log"
        assert errors[0].timestamp == parse_log_timestamp("Jul-03-2025 12:49:28")

    def test_stack_trace_and_context_lines(self):
        content = "\n".join([
            "[Jul-03-2025 12:49:28] ERROR: Complex error",
            "This is additional context",
            "    at someFunction (/path/to/file.js:10:5)",
            "    at other (/path/to/other.js:1:1)",
        ])

        errors = parse_error_log_file(content, LogService.CONSOLE_ERROR, "error.log")

        assert len(errors) == 1
        assert errors[0].stack == [
            "at someFunction (/path/to/file.js:10:5)",
            "at other (/path/to/other.js:1:1)",
        ]
        assert "This is additional context" in errors[0].full_text

    def test_multiple_errors(self):
        content = "\n".join([
            "[Jul-03-2025 12:49:28] ERROR: First",
            "    at a (/a.js:1:1)",
            "[Jul-03-2025 12:50:00] ERROR: Second",
        ])

        errors = parse_error_log_file(content, LogService.CONSOLE_ERROR, "error.log")

        assert [error.message for error in errors] == ["First", "Second"]

    def test_json_details(self):
        content = "\n".join([
            "[Jul-03-2025 12:49:28] ERROR: Error with details",
            "{",
            '  "code": "ERR_INVALID",',
            '  "details": "Additional info"',
            "}",
        ])

        errors = parse_error_log_file(content, LogService.CONSOLE_ERROR, "error.log")

        assert len(errors) == 1
        assert '"code": "ERR_INVALID",' in errors[0].details
        assert errors[0].details.endswith("}")

    def test_header_without_timestamp(self):
        errors = parse_error_log_file("FirebaseAuthError: Invalid token", LogService.CONSOLE_ERROR, "error.log")

        assert len(errors) == 1
        assert errors[0].message == "FirebaseAuthError: Invalid token"
        assert _is_recent(errors[0].timestamp)


class TestTimestamps:
    def test_parse_log_timestamp_uses_server_local_time(self):
        expected = datetime(2025, 7, 3, 12, 49, 28).astimezone().astimezone(timezone.utc)
        assert parse_log_timestamp("Jul-03-2025 12:49:28") == expected

    def test_parse_log_timestamp_falls_back_to_now(self):
        assert _is_recent(parse_log_timestamp("invalid-format"))
        assert _is_recent(parse_log_timestamp("Xyz-15-2025 12:00:00"))

    def test_normalize_nginx_offsets(self):
        assert normalize_timestamp("15/Jan/2025:12:00:00 +0200") == utc("2025-01-15T10:00:00Z")
        assert normalize_timestamp("15/Jan/2025:12:00:00 -0800") == utc("2025-01-15T20:00:00Z")
        assert normalize_timestamp("15/Jan/2025:12:00:00 +0000") == utc("2025-01-15T12:00:00Z")

    def test_normalize_iso_and_standard_strings(self):
        assert normalize_timestamp("2025-01-15T12:00:00Z") == utc("2025-01-15T12:00:00Z")
        assert normalize_timestamp("January 15, 2025 12:00:00") == utc("2025-01-15T12:00:00Z")

    def test_normalize_falls_back_to_now(self):
        assert _is_recent(normalize_timestamp("completely invalid format"))


class TestParseLogFile:
    def test_app_logs_skip_invalid_lines(self):
        content = "\n".join([
            json.dumps({"timestamp": "2025-01-15T10:00:00Z", "message": "Log 1", "level": "info"}),
            "invalid line",
            json.dumps({"timestamp": "2025-01-15T12:00:00Z", "message": "Log 3", "level": "warn"}),
        ])

        entries = parse_log_file(content, LogService.APP, "app.log")

        assert [(e.message, e.level) for e in entries] == [("Log 1", LogLevel.INFO), ("Log 3", LogLevel.WARN)]

    def test_dispatches_by_service(self):
        assert len(parse_log_file(NGINX_LINE, LogService.NGINX, "access.log")) == 1
        assert len(parse_log_file(
            "[Jan-15-2025 12:00:00] warn (1.0.0): slow", LogService.CONSOLE, "out.log"
        )) == 1
        assert len(parse_log_file("TypeError: x", LogService.CONSOLE_ERROR, "err.log")) == 1

    def test_unknown_service_and_empty_content(self):
        assert parse_log_file("anything", LogService.SYSTEM, "x.log") == []
        assert parse_log_file("", LogService.APP, "app.log") == []
        assert parse_log_file("\n\n\n", LogService.CONSOLE, "out.log") == []
