"""Dataset manager for inspecting and preprocessing the training dataset"""

import logging
import os
from typing import Any, Dict, Optional

import pandas as pd

from ..exceptions import ValidationError
from ..http_client import HTTPClient

logger = logging.getLogger(__name__)


class DatasetManager:
    """Inspects and preprocesses the dataset held by the backend"""

    def __init__(self, http_client: HTTPClient, interactive: bool = True):
        self.http = http_client
        self.interactive = interactive
        self.total_rows: Optional[int] = None

    def info(self) -> Dict[str, Any]:
        """
        Dataset summary (rows, columns, ...)

        Also remembers the row count used to validate row numbers.
        """
        response = self.http.get('/api/datasets/info')
        rows = (response.get('info') or {}).get('rows')
        if rows is not None:
            self.total_rows = int(rows)
        return response

    def sample(self, n: int = 10) -> pd.DataFrame:
        """
        First rows of the dataset as a DataFrame

        Args:
            n: Number of rows
        """
        if n <= 0:
            raise ValidationError("n must be positive")
        response = self.http.get('/api/datasets/sample', params={'n': n})
        return pd.DataFrame(response.get('data', []), columns=response.get('columns'))

    def row(self, row_number: Any) -> Dict[str, Any]:
        """
        Fetch one row

        Args:
            row_number: Zero-based row index

        Raises:
            ValidationError: If the index is not a non-negative integer or is past the end
        """
        try:
            index = int(row_number)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid row number: {row_number}")
        if index < 0 or (self.total_rows is not None and index >= self.total_rows):
            upper = f"{self.total_rows - 1}" if self.total_rows else "the last row"
            raise ValidationError(f"Row number must be between 0 and {upper}")

        response = self.http.get(f'/api/datasets/row/{index}')
        if response.get('total_rows'):
            self.total_rows = int(response['total_rows'])
        return response

    def column(self, column_name: str) -> Dict[str, Any]:
        """Statistics of a single column"""
        if not column_name:
            raise ValidationError("column_name is required")
        return self.http.get(f'/api/datasets/column/{column_name}')

    def correlation(self) -> pd.DataFrame:
        """Correlation matrix of the numeric columns"""
        response = self.http.get('/api/datasets/correlation')
        matrix = response.get('correlation', response)
        return pd.DataFrame(matrix)

    def preprocess(self, file_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Run preprocessing on the backend

        Args:
            file_path: CSV file to upload first. Without it the data already
                on the server is preprocessed.

        Returns:
            dict: Preprocessing summary (total_rows, ...)
        """
        if file_path is not None:
            if not file_path.lower().endswith('.csv'):
                raise ValidationError("Please select a valid CSV file")
            if not os.path.isfile(file_path):
                raise ValidationError(f"File not found: {file_path}")
            response = self.http.post_file('/api/datasets/preprocess', file_path)
        else:
            response = self.http.post('/api/datasets/preprocess')

        self.total_rows = response.get('total_rows', self.total_rows)
        logger.info(f"Preprocessing finished: {response.get('total_rows', 'unknown')} rows")
        if self.interactive:
            print("✅ Data preprocessing completed successfully!")
        return response
