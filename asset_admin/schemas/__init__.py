from asset_admin.schemas.import_result import ImportResultResponse, ImportRowError
from asset_admin.schemas.label import (
    LabelBatchPrintRequest,
    LabelBatchPrintResponse,
    LabelOverrides,
    LabelPrintRequest,
    LabelPrintResponse,
    LabelSettings,
    LabelSettingsUpdate,
)
from asset_admin.schemas.token import TokenPayload
