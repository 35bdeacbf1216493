"""Spreadsheet reading (xlsx / xls / csv) through pandas."""
