from .outcomes import DispatchLog, DispatchReport, DispatchSummary


def summarize(log: DispatchLog) -> DispatchSummary:
    sent = len(log.sent)
    failed = len(log.failed)
    return DispatchSummary(sent=sent, failed=failed, total=sent + failed)


def build_report(log: DispatchLog) -> DispatchReport:
    return DispatchReport(summary=summarize(log), log=log)
