#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Aggregation engine: records, trackers, accounts and report outputs"""
