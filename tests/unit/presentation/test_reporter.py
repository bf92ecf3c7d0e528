import io

from reviewgate.presentation.reporter import ActionsReporter, LogReporter, escape_data


def test_escape_data():
    assert escape_data("50% done\r\nnext") == "50%25 done%0D%0Anext"


class TestActionsReporter:
    def test_info_is_printed_verbatim(self):
        stream = io.StringIO()
        reporter = ActionsReporter(stream)

        reporter.info("Found affected files:\n - a.py")

        assert stream.getvalue() == "Found affected files:\n - a.py\n"
        assert reporter.failed is False

    def test_warning_becomes_annotation(self):
        stream = io.StringIO()

        ActionsReporter(stream).warning("Team 'x' is not defined\nskipping")

        assert stream.getvalue() == "::warning::Team 'x' is not defined%0Askipping\n"

    def test_set_failed(self):
        stream = io.StringIO()
        reporter = ActionsReporter(stream)

        reporter.set_failed("Missing required approvals.")

        assert reporter.failed is True
        assert stream.getvalue() == "::error::Missing required approvals.\n"


def test_log_reporter_tracks_failure():
    reporter = LogReporter(repo="octocat/service", pr_number=1)

    reporter.info("checked")
    reporter.warning("careful")
    reporter.set_failed("broken")

    assert reporter.failed is True
