#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Minimal setup.py for symvec. All metadata lives in pyproject.toml; this file
only serves packaging tools that still invoke setup.py directly.
"""

import setuptools

if __name__ == "__main__":
    setuptools.setup()
