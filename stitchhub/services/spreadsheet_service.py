import pandas as pd
from typing import List, Optional
from io import BytesIO


class SpreadsheetService:
    """Turns lists of rows into downloadable CSV or Excel files."""

    @staticmethod
    def _frame(rows: List[dict], columns: Optional[List[str]] = None) -> pd.DataFrame:
        df = pd.DataFrame(rows, columns=columns)

        for col in df.columns:
            if pd.api.types.is_datetime64_any_dtype(df[col]):
                df[col] = df[col].dt.strftime('%Y-%m-%d %H:%M:%S')

        return df

    @staticmethod
    def to_csv(rows: List[dict], columns: Optional[List[str]] = None) -> BytesIO:
        """
        Export rows to CSV.

        Args:
            rows: List of dictionaries to export
            columns: Column order; also used as the header when ``rows`` is empty

        Returns:
            BytesIO object containing CSV data
        """
        df = SpreadsheetService._frame(rows, columns)

        buffer = BytesIO()
        df.to_csv(buffer, index=False, encoding='utf-8')
        buffer.seek(0)

        return buffer

    @staticmethod
    def to_excel(rows: List[dict], columns: Optional[List[str]] = None, sheet_name: str = 'Data') -> BytesIO:
        df = SpreadsheetService._frame(rows, columns)

        buffer = BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name=sheet_name)

        buffer.seek(0)
        return buffer


# Singleton instance
spreadsheet_service = SpreadsheetService()
