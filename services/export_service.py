"""Export service - turn tailored text into a downloadable document."""

import logging
from pathlib import Path

from config_loader import get_export_filename, get_output_format, get_page_geometry

from .base_service import BaseService
from .document_converter import convert_document
from .exceptions import ValidationError
from .models import ExportResult, OutputFormat, PageGeometry
from .paginator import paginate

logger = logging.getLogger(__name__)


class ExportService(BaseService):
    """Paginates text with the configured geometry and writes it to disk.

    No remote calls.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.geometry = PageGeometry(**get_page_geometry(self.config))

    def export(
        self,
        text: str,
        output_path: str | Path | None = None,
        output_format: str | OutputFormat | None = None,
    ) -> ExportResult:
        """Export text as a paginated document.

        Args:
            text: Text to lay out. Empty text still yields one (blank) page.
            output_path: Target file. Defaults to the configured filename
                in the output directory.
            output_format: "pdf", "docx" or "both". Defaults to config.

        Returns:
            ExportResult with page count and written file paths.

        Raises:
            ValidationError: If the output format is unknown.
        """
        fmt = self._resolve_format(output_format)
        path = Path(output_path) if output_path else self.output_dir / get_export_filename(self.config)

        pages = paginate(text, self.geometry)
        written = convert_document(pages, path, fmt, self.geometry)

        logger.info("Exported %d page(s) as %s", len(pages), fmt.value)
        return ExportResult(
            page_count=len(pages),
            line_count=sum(page.line_count for page in pages),
            artifacts={kind: str(p) for kind, p in written.items()},
        )

    def _resolve_format(self, output_format: str | OutputFormat | None) -> OutputFormat:
        value = output_format or get_output_format(self.config)
        try:
            return OutputFormat(value)
        except ValueError:
            valid = ", ".join(f.value for f in OutputFormat)
            raise ValidationError(
                f"Invalid output format: {value}. Valid: {valid}", field="output_format"
            ) from None
