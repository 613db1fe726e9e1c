#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
File handling utilities for the closing report
"""

import os
import logging
from pathlib import Path


class FileHandler:
    @staticmethod
    def validate_csv_file(file_path):
        """Validate a call export before it is read"""
        errors = []
        warnings = []

        if not os.path.exists(file_path):
            errors.append("File does not exist")
            return errors, warnings

        if not os.access(file_path, os.R_OK):
            errors.append("File is not readable")
            return errors, warnings

        file_size = os.path.getsize(file_path)
        if file_size == 0:
            warnings.append("File is empty")
            return errors, warnings

        if file_size > 500 * 1024 * 1024:  # 500MB
            warnings.append("Large file size may cause slow processing")

        if not str(file_path).lower().endswith('.csv'):
            warnings.append("File does not have .csv extension")

        try:
            with open(file_path, 'r', encoding='utf-8', errors='ignore') as f:
                first_lines = [f.readline() for _ in range(10)]
            if not any(',' in line for line in first_lines):
                warnings.append("File does not appear to be comma-separated")
        except OSError as e:
            errors.append(f"Error reading file: {e}")

        return errors, warnings

    @staticmethod
    def safe_create_directory(dir_path):
        """Create directory if it doesn't exist"""
        try:
            Path(dir_path).mkdir(parents=True, exist_ok=True)
            return True
        except OSError as e:
            logging.error(f"Error creating directory {dir_path}: {e}")
            return False

    @staticmethod
    def resolve_output_dir(output_path):
        """'Desktop' means the user's desktop, as in the original exports"""
        if not output_path or output_path.strip().lower() == 'desktop':
            return str(Path.home() / 'Desktop')
        return os.path.expanduser(output_path)
