# File: asset_admin/services/label_service.py
"""
Asset label rendering.

Labels are sized for 62 mm x 29 mm landscape tape (176 x 82 pt). The QR code
sits on the left, the text block on the right with a Code128 barcode of the
item number beneath it, and the organisation name is centred along the bottom
edge. Layout coordinates are in points and scaled to ``dpi`` when rasterised.

Usage:
    renderer = LabelRenderer()
    pdf_bytes = renderer.render_pdf(LabelAsset.from_asset(asset), label_settings)
"""

import io
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import qrcode
from barcode import Code128
from barcode.errors import BarcodeError
from barcode.writer import ImageWriter
from PIL import Image, ImageDraw, ImageFont
from sqlalchemy.orm import Session

from asset_admin.core.config import settings
from asset_admin.core.exceptions import (
    EntityNotFoundException,
    LabelException,
    LabelRenderException,
)
from asset_admin.db.models import Asset
from asset_admin.repositories import AssetRepository
from asset_admin.schemas.label import (
    LabelBatchPrintRequest,
    LabelOverrides,
    LabelPrintRequest,
    LabelSettings,
)
from asset_admin.services.label_printer import LabelPrinter
from asset_admin.services.label_settings_service import LabelSettingsService, apply_overrides

logger = logging.getLogger(__name__)

LABEL_WIDTH_PT = 176
LABEL_HEIGHT_PT = 82

MARGIN = 4
QR_SIZE = 48
BOTTOM_MARGIN = 14
TEXT_GAP = 6

BARCODE_TOP = 52
BARCODE_HEIGHT = 13
# Rendered at a fixed resolution, then scaled to the label
BARCODE_RENDER_DPI = 300

BOLD_FONT = "DejaVuSans-Bold.ttf"
REGULAR_FONT = "DejaVuSans.ttf"

BLACK = (0, 0, 0)
GREY = (77, 77, 77)


@dataclass
class LabelAsset:
    """The asset fields a label can show."""

    item_number: str
    serial_number: Optional[str] = None
    model: Optional[str] = None
    hostname: Optional[str] = None
    assigned_to: Optional[str] = None
    manufacturer_name: Optional[str] = None
    organization_name: Optional[str] = None
    primary_ip: Optional[str] = None

    @classmethod
    def from_asset(cls, asset: Asset, organization_name: Optional[str] = None) -> "LabelAsset":
        return cls(
            item_number=asset.item_number,
            serial_number=asset.serial_number,
            model=asset.model,
            hostname=asset.hostname,
            assigned_to=asset.assigned_to,
            manufacturer_name=asset.manufacturer.name if asset.manufacturer else None,
            organization_name=organization_name,
            primary_ip=asset.primary_ip,
        )

    @property
    def model_line(self) -> Optional[str]:
        if not self.model:
            return None
        if self.manufacturer_name:
            return f"{self.manufacturer_name} {self.model}"
        return self.model


def truncate_text(text: str, max_length: int) -> str:
    """Shorten ``text`` to ``max_length`` characters, ending in ``..`` when cut."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 2] + ".."


def build_qr_content(asset: LabelAsset, label_settings: LabelSettings) -> str:
    """
    Build the newline-separated text encoded in the QR code.

    Args:
        asset: Label data
        label_settings: Display flags deciding which lines are included

    Returns:
        QR payload
    """
    lines: List[str] = []
    if label_settings.show_assigned_to and asset.assigned_to:
        lines.append(asset.assigned_to)
    lines.append(f"Item: {asset.item_number}")
    if label_settings.show_model and asset.model_line:
        lines.append(asset.model_line)
    if label_settings.show_serial_number and asset.serial_number:
        lines.append(f"S/N: {asset.serial_number}")
    if asset.organization_name:
        lines.append(asset.organization_name)
    return "\n".join(lines)


def text_lines(asset: LabelAsset, label_settings: LabelSettings) -> List[Tuple[str, int, bool, int]]:
    """
    Lines of the text block as ``(text, font size, bold, line advance)``.
    """
    lines = []
    if label_settings.show_assigned_to and asset.assigned_to:
        lines.append((truncate_text(asset.assigned_to, 20), 10, True, 12))
    lines.append((truncate_text(f"Item:{asset.item_number}", 22), 9, True, 12))
    if label_settings.show_model and asset.model_line:
        lines.append((truncate_text(asset.model_line, 24), 8, False, 11))
    if label_settings.show_serial_number and asset.serial_number:
        lines.append((truncate_text(f"S/N:{asset.serial_number}", 24), 8, False, 11))
    return lines


class LabelRenderer:
    """
    Renders labels to PNG and PDF with Pillow.

    Attributes:
        dpi: Raster resolution of the label image
    """

    def __init__(self, dpi: Optional[int] = None):
        self.dpi = dpi or settings.LABEL_DPI
        self.scale = self.dpi / 72.0
        self._fonts = {}

    def _px(self, points: float) -> int:
        return int(round(points * self.scale))

    def _font(self, size_pt: int, bold: bool):
        key = (size_pt, bold)
        if key not in self._fonts:
            size = self._px(size_pt)
            try:
                self._fonts[key] = ImageFont.truetype(BOLD_FONT if bold else REGULAR_FONT, size)
            except OSError:
                self._fonts[key] = ImageFont.load_default(size=size)
        return self._fonts[key]

    def qr_image(self, content: str, size_px: int) -> Image.Image:
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=1,
        )
        qr.add_data(content)
        qr.make(fit=True)
        image = qr.make_image(fill_color="black", back_color="white").convert("RGB")
        return image.resize((size_px, size_px), Image.NEAREST)

    def barcode_image(self, item_number: str, size: Tuple[int, int]) -> Optional[Image.Image]:
        """Code128 of the item number, or None when it cannot be encoded."""
        try:
            image = Code128(item_number, writer=ImageWriter()).render(
                writer_options={
                    "write_text": False,
                    "quiet_zone": 1,
                    "module_height": 5,
                    "dpi": BARCODE_RENDER_DPI,
                }
            )
        except BarcodeError as e:
            logger.warning(f"Skipping barcode for {item_number!r}: {e}")
            return None
        return image.convert("RGB").resize(size, Image.NEAREST)

    def render_image(self, asset: LabelAsset, label_settings: LabelSettings) -> Image.Image:
        """
        Render a label to an RGB image.

        Raises:
            LabelRenderException: If the label cannot be drawn
        """
        try:
            canvas = Image.new("RGB", (self._px(LABEL_WIDTH_PT), self._px(LABEL_HEIGHT_PT)), "white")
            draw = ImageDraw.Draw(canvas)

            # QR vertically centred above the organisation line
            qr_top = LABEL_HEIGHT_PT - BOTTOM_MARGIN - (LABEL_HEIGHT_PT - BOTTOM_MARGIN - QR_SIZE) / 2 - QR_SIZE
            qr = self.qr_image(build_qr_content(asset, label_settings), self._px(QR_SIZE))
            canvas.paste(qr, (self._px(MARGIN), self._px(qr_top)))

            text_x = MARGIN + QR_SIZE + TEXT_GAP
            baseline = 14
            for text, size, bold, advance in text_lines(asset, label_settings):
                draw.text(
                    (self._px(text_x), self._px(baseline)),
                    text,
                    fill=BLACK,
                    font=self._font(size, bold),
                    anchor="ls",
                )
                baseline += advance

            barcode_size = (self._px(LABEL_WIDTH_PT - MARGIN - text_x), self._px(BARCODE_HEIGHT))
            barcode = self.barcode_image(asset.item_number, barcode_size)
            if barcode is not None:
                canvas.paste(barcode, (self._px(text_x), self._px(BARCODE_TOP)))

            if asset.organization_name:
                draw.text(
                    (self._px(LABEL_WIDTH_PT / 2), self._px(LABEL_HEIGHT_PT - 4)),
                    truncate_text(asset.organization_name, 38),
                    fill=GREY,
                    font=self._font(8, False),
                    anchor="ms",
                )
        except (OSError, ValueError) as e:
            logger.error(f"Failed to render label for {asset.item_number}: {e}", exc_info=True)
            raise LabelRenderException(f"Failed to render label: {e}", asset.item_number)

        return canvas

    def render_png(self, asset: LabelAsset, label_settings: LabelSettings) -> bytes:
        output = io.BytesIO()
        self.render_image(asset, label_settings).save(output, format="PNG", dpi=(self.dpi, self.dpi))
        return output.getvalue()

    def render_pdf(self, asset: LabelAsset, label_settings: LabelSettings) -> bytes:
        """Render a single-page label PDF."""
        return self.render_batch_pdf([asset], label_settings)

    def render_batch_pdf(self, assets: Sequence[LabelAsset], label_settings: LabelSettings) -> bytes:
        """
        Render one PDF page per asset, in the given order.

        Raises:
            LabelRenderException: If ``assets`` is empty or a page fails
        """
        if not assets:
            raise LabelRenderException("No labels to render")

        pages = [self.render_image(asset, label_settings) for asset in assets]
        output = io.BytesIO()
        pages[0].save(
            output,
            format="PDF",
            resolution=float(self.dpi),
            save_all=True,
            append_images=pages[1:],
        )
        logger.debug(f"Rendered {len(pages)} label page(s)")
        return output.getvalue()


class LabelService:
    """
    Service producing and printing labels for stored assets.

    Combines the stored label preferences, the organisation name, the
    renderer and the printer.
    """

    def __init__(
        self,
        session: Session,
        renderer: Optional[LabelRenderer] = None,
        printer: Optional[LabelPrinter] = None,
    ):
        """
        Initialize the label service.

        Args:
            session: Database session
            renderer: Optional renderer, defaults to ``LabelRenderer()``
            printer: Optional printer, defaults to ``LabelPrinter()``
        """
        self.session = session
        self.asset_repository = AssetRepository(session)
        self.settings_service = LabelSettingsService(session)
        self.renderer = renderer or LabelRenderer()
        self.printer = printer or LabelPrinter()

    def _resolve_settings(
        self, overrides: Optional[LabelOverrides] = None
    ) -> Tuple[LabelSettings, Optional[str]]:
        stored = self.settings_service.get_settings()
        return apply_overrides(stored, overrides), self.settings_service.get_organization_name()

    def get_asset(self, asset_id: int) -> Asset:
        asset = self.asset_repository.get_with_relations(asset_id)
        if asset is None:
            raise EntityNotFoundException("Asset", asset_id)
        return asset

    def preview_png(self, asset_id: int, overrides: Optional[LabelOverrides] = None) -> bytes:
        """Render the label of one asset as a PNG image."""
        asset = self.get_asset(asset_id)
        label_settings, organization = self._resolve_settings(overrides)
        return self.renderer.render_png(LabelAsset.from_asset(asset, organization), label_settings)

    def download_pdf(
        self, asset_id: int, overrides: Optional[LabelOverrides] = None
    ) -> Tuple[str, bytes]:
        """
        Render the label of one asset as a single-page PDF.

        Returns:
            Tuple of download filename and PDF bytes
        """
        asset = self.get_asset(asset_id)
        label_settings, organization = self._resolve_settings(overrides)
        pdf_bytes = self.renderer.render_pdf(LabelAsset.from_asset(asset, organization), label_settings)
        return f"label-{asset.item_number}.pdf", pdf_bytes

    def download_batch_pdf(
        self, asset_ids: List[int], overrides: Optional[LabelOverrides] = None
    ) -> Tuple[str, bytes]:
        """
        Render the labels of several assets into one PDF, one page each.

        Unknown ids are ignored.

        Raises:
            EntityNotFoundException: If none of the ids exist
        """
        assets = self.asset_repository.get_many_with_relations(asset_ids)
        if not assets:
            raise EntityNotFoundException("Asset", asset_ids)

        label_settings, organization = self._resolve_settings(overrides)
        pdf_bytes = self.renderer.render_batch_pdf(
            [LabelAsset.from_asset(asset, organization) for asset in assets], label_settings
        )
        return f"labels-batch-{len(assets)}.pdf", pdf_bytes

    def print_label(self, asset_id: int, request: LabelPrintRequest) -> Dict[str, Any]:
        """
        Print ``request.copies`` labels for one asset on the configured printer.

        Raises:
            EntityNotFoundException: If the asset does not exist
            LabelRenderException: If the label cannot be rendered
            PrintException: If the spooler fails
        """
        asset = self.get_asset(asset_id)
        label_settings, organization = self._resolve_settings(request)
        pdf_bytes = self.renderer.render_pdf(LabelAsset.from_asset(asset, organization), label_settings)
        self.printer.print_pdf(pdf_bytes, label_settings.printer_name, request.copies)
        return {
            "success": True,
            "message": f"Printed {request.copies} label(s) for {asset.item_number}",
        }

    def print_batch(self, request: LabelBatchPrintRequest) -> Dict[str, Any]:
        """
        Print labels for several assets, collecting per-asset failures.

        Ids that match no asset are counted as failures.

        Returns:
            Dictionary with ``success``, ``printed``, ``failed`` and ``errors``
        """
        assets = self.asset_repository.get_many_with_relations(request.asset_ids)
        label_settings, organization = self._resolve_settings(request)

        printed = 0
        failed = 0
        errors: List[str] = []

        for asset in assets:
            try:
                pdf_bytes = self.renderer.render_pdf(
                    LabelAsset.from_asset(asset, organization), label_settings
                )
                self.printer.print_pdf(pdf_bytes, label_settings.printer_name, request.copies)
                printed += 1
            except LabelException as e:
                failed += 1
                errors.append(f"{asset.item_number}: {e.message}")

        missing = len(set(request.asset_ids)) - len(assets)
        if missing > 0:
            failed += missing
            errors.append(f"Assets not found: {missing}")

        logger.info(f"Batch print finished: {printed} printed, {failed} failed")
        return {
            "success": failed == 0,
            "printed": printed,
            "failed": failed,
            "errors": errors or None,
        }

    def list_printers(self) -> List[str]:
        return self.printer.list_printers()
