#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Contains units that combine the input data byte by byte with a cyclically repeated key.
"""
