"""Drive the report plugin directly, the way a test runner integration would."""
from pathlib import Path

from stepnest import events
from stepnest.config import ReporterConfig
from stepnest.core import CaseInfo, MetaStep, Step, SuiteInfo
from stepnest.events import EventDispatcher
from stepnest.plugin import ReportPlugin


def main() -> None:
    dispatcher = EventDispatcher()
    plugin = ReportPlugin(ReporterConfig(output_dir=Path("output"))).register(dispatcher)

    test = CaseInfo(title="signs in", tags=("@smoke",))
    dispatcher.emit(events.SUITE_BEFORE, SuiteInfo(title="Login", tests=(test,)))
    dispatcher.emit(events.TEST_BEFORE, test)
    dispatcher.emit(events.TEST_STARTED, test)

    login = MetaStep("I log in as \"ann\"", parent=MetaStep("Given I am a registered user"))
    for text in ("I fill field \"email\"", "I click \"Sign in\""):
        step = Step(text=text, meta_step=login)
        dispatcher.emit(events.STEP_STARTED, step)
        dispatcher.emit(events.STEP_PASSED, step)
    plugin.add_attachment("note", "logged in", "text/plain")

    dispatcher.emit(events.TEST_PASSED, test)
    dispatcher.emit(events.SUITE_AFTER, None)
    for path in plugin.writer.written_files():
        print(path)


if __name__ == "__main__":
    main()
