#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Closing Report - call record aggregation and end-of-day reporting
"""

__version__ = "1.0.0"
