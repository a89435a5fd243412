"""
Export service for Prompt2App: packages a generated app as a zip download
"""
import io
import zipfile
import logging

from services.asset_splitter import split
from services.errors import ExportError

logger = logging.getLogger(__name__)

ARCHIVE_FILENAME = "web-app.zip"
ARCHIVE_CONTENT_TYPE = "application/zip"


class ExportService:
    def __init__(self, compression: int = zipfile.ZIP_DEFLATED):
        self.compression = compression

    def build_archive(self, html: str, css: str = "", js: str = "") -> bytes:
        """Zip index.html plus style.css and script.js when they have content"""
        try:
            zip_buffer = io.BytesIO()
            with zipfile.ZipFile(zip_buffer, "w", self.compression) as zip_file:
                zip_file.writestr("index.html", html)
                if css:
                    zip_file.writestr("style.css", css)
                if js:
                    zip_file.writestr("script.js", js)
            return zip_buffer.getvalue()

        except Exception as e:
            logger.error(f"Error creating zip file: {str(e)}", exc_info=True)
            raise ExportError() from e

    def export_generation(self, code: str) -> bytes:
        """Split a generated document and package the pieces"""
        assets = split(code)
        archive = self.build_archive(assets.html, assets.css, assets.js)
        logger.info(
            f"Built archive ({len(archive)} bytes, css={'yes' if assets.css else 'no'}, js={'yes' if assets.js else 'no'})"
        )
        return archive

    def get_content_type(self) -> str:
        return ARCHIVE_CONTENT_TYPE

    def get_download_headers(self, filename: str = ARCHIVE_FILENAME) -> dict:
        return {"Content-Disposition": f'attachment; filename="{filename}"'}


export_service = ExportService()


def get_export_service() -> ExportService:
    return export_service
