from io import BytesIO
from typing import Dict, List

import pandas as pd
from fastapi.responses import StreamingResponse
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def rows_to_xlsx_response(rows: List[Dict], columns: Dict[str, str], sheet_name: str, filename: str) -> StreamingResponse:
    """
    Build an in-memory Excel workbook from a list of dicts and stream it back.

    ``columns`` maps row keys to the Spanish header shown in the sheet; its order
    is the column order.
    """
    df = pd.DataFrame(rows, columns=list(columns.keys()))
    df = df.rename(columns=columns)

    excel_file = BytesIO()
    with pd.ExcelWriter(excel_file, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
        ws = writer.sheets[sheet_name]

        header_fill = PatternFill(start_color="1F4E78", end_color="1F4E78", fill_type="solid")
        for col_idx, header in enumerate(columns.values(), start=1):
            cell = ws.cell(row=1, column=col_idx)
            cell.font = Font(bold=True, color="FFFFFF")
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center")
            ws.column_dimensions[get_column_letter(col_idx)].width = max(12, len(header) + 4)
    excel_file.seek(0)

    headers = {
        'Content-Disposition': f'attachment; filename="{filename}"'
    }
    return StreamingResponse(excel_file, media_type=XLSX_MEDIA_TYPE, headers=headers)
