"""Utility functions"""
from .numbers import parse_decimal, parse_decimals, format_number, is_whole
