# File: asset_admin/services/label_printer.py
"""
Submission of label documents to the CUPS print spooler.

Jobs are piped to ``lp`` on stdin; printer queues are listed with
``lpstat -a``. Both commands are configurable.
"""

import logging
import subprocess
from typing import List, Optional

from asset_admin.core.config import settings
from asset_admin.core.exceptions import PrintException

logger = logging.getLogger(__name__)


class LabelPrinter:
    """
    Sends PDF documents to a named printer queue.

    Args:
        print_command: Executable used to submit jobs (``lp``)
        list_command: Executable used to list queues (``lpstat``)
        timeout: Seconds to wait for each command
    """

    def __init__(
        self,
        print_command: Optional[str] = None,
        list_command: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.print_command = print_command or settings.LABEL_PRINT_COMMAND
        self.list_command = list_command or settings.LABEL_PRINTER_LIST_COMMAND
        self.timeout = timeout or settings.LABEL_PRINT_TIMEOUT

    def print_pdf(self, pdf_bytes: bytes, printer_name: str, copies: int = 1) -> None:
        """
        Submit ``copies`` separate print jobs for a PDF document.

        Args:
            pdf_bytes: Document to print
            printer_name: Target queue
            copies: Number of jobs to submit

        Raises:
            PrintException: If the spooler cannot be reached or rejects a job
        """
        for copy_number in range(1, copies + 1):
            try:
                completed = subprocess.run(
                    [self.print_command, "-d", printer_name],
                    input=pdf_bytes,
                    capture_output=True,
                    timeout=self.timeout,
                    check=False,
                )
            except (OSError, subprocess.TimeoutExpired) as e:
                logger.error(f"Print command failed for printer '{printer_name}': {e}")
                raise PrintException(f"Print failed: {e}", printer_name)

            if completed.returncode != 0:
                stderr = completed.stderr.decode("utf-8", errors="replace").strip()
                logger.error(
                    f"Printer '{printer_name}' rejected job {copy_number}/{copies}: {stderr}"
                )
                raise PrintException(f"Print failed: {stderr or completed.returncode}", printer_name)

            logger.info(f"Submitted label job {copy_number}/{copies} to '{printer_name}'")

    def list_printers(self) -> List[str]:
        """
        List the printer queues known to the spooler.

        Returns:
            Queue names, or an empty list when the spooler is unavailable
        """
        try:
            completed = subprocess.run(
                [self.list_command, "-a"],
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning(f"Failed to get printers: {e}")
            return []

        printers = []
        for line in completed.stdout.splitlines():
            parts = line.split()
            if parts:
                printers.append(parts[0])
        return printers
