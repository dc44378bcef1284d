"""Console summary output."""

from __future__ import annotations

from ..analysis import AuditReport, ReportTable
from .base import OutputModule, register_output
from .email_sender import summary_counts


@register_output("cli")
class CliOutput(OutputModule):
    """Plain-text counts plus the per-location summaries."""

    def render(self, report: AuditReport) -> None:
        out = self.context.stdout
        print("SITEAUDIT SUMMARY", file=out)
        for label, count in summary_counts(report):
            print(f"  {label:<32} {count:>6}", file=out)
        print("", file=out)
        self._emit_table(out, "Users by office", report.user_summary)
        self._emit_table(out, "Printers by location", report.printer_summary)
        if self.context.attachments:
            print("Artifacts:", file=out)
            for path in self.context.attachments:
                print(f"  {path}", file=out)

    def _emit_table(self, out, title: str, table: ReportTable) -> None:
        print(title, file=out)
        if not table.rows:
            print("  (no data)", file=out)
            print("", file=out)
            return

        widths = [len(header) for header in table.headers]
        for row in table.rows:
            for idx, cell in enumerate(row):
                widths[idx] = max(widths[idx], len(str(cell)))

        def fmt_row(row):
            return " | ".join(
                str(cell).ljust(widths[idx]) for idx, cell in enumerate(row)
            )

        print("  " + fmt_row(table.headers), file=out)
        print("  " + "-+-".join("-" * width for width in widths), file=out)
        for row in table.rows:
            print("  " + fmt_row(row), file=out)
        print("", file=out)
