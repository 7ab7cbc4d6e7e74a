"""Parse unified diff text into per-file hunks."""

import logging
from unidiff import PatchSet
from unidiff.errors import UnidiffParseError
from .errors import PatchFormatError
from .models import FilePatch, Hunk, PatchDocument

logger = logging.getLogger(__name__)


class PatchParser:
    """Parse unified diff into structured format."""

    def parse(self, diff_text: str) -> PatchDocument:
        """Parse a unified diff into a PatchDocument.

        Text without any recognizable diff headers yields an empty document.

        Args:
            diff_text: The unified diff text

        Returns:
            PatchDocument with one FilePatch per file, in order

        Raises:
            PatchFormatError: If the diff headers are present but malformed
        """
        try:
            patch_set = PatchSet(diff_text)
        except UnidiffParseError as e:
            raise PatchFormatError(f"Malformed unified diff: {e}") from e

        document = PatchDocument()
        for patched_file in patch_set:
            file_patch = FilePatch(
                source_file=patched_file.source_file,
                target_file=patched_file.target_file,
            )
            for hunk in patched_file:
                file_patch.hunks.append(self._build_hunk(hunk))
            document.files.append(file_patch)

        logger.debug(f"Parsed {len(document.files)} file(s), {len(document.hunks)} hunk(s)")
        return document

    def _build_hunk(self, hunk) -> Hunk:
        """Build a Hunk from a unidiff hunk, keeping body lines verbatim."""
        # str(line) is the marker plus the value, including its newline
        body_lines = [str(line).rstrip('\n') for line in hunk]
        return Hunk(
            old_start=hunk.source_start,
            old_lines=hunk.source_length,
            new_start=hunk.target_start,
            new_lines=hunk.target_length,
            body_lines=body_lines,
            section_header=hunk.section_header or "",
        )
