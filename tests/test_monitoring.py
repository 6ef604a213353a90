from civiclink.core.monitoring.logging import get_contextual_logger, get_logger


class TestLogging:
    def test_package_loggers_print_each_record_once(self, capsys):
        get_logger("civiclink")
        logger = get_logger("civiclink.tests.monitoring")

        logger.warning("store reachable again")

        assert logger.propagate is False
        assert capsys.readouterr().out.count("store reachable again") == 1

    def test_bound_context_is_appended(self, capsys):
        logger = get_contextual_logger("civiclink.tests.context", issue_id="abc", user_id=None)

        logger.warning("vote toggled")

        output = capsys.readouterr().out
        assert "vote toggled [issue_id=abc]" in output
        assert "user_id" not in output
