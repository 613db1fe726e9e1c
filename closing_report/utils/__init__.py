#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Configuration, logging, file and mail helpers"""
