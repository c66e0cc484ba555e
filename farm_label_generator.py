#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Generate plot, row and plant labels for field trials.
"""

import sys

import field_label_generator.cli


if __name__ == "__main__":
	sys.exit(field_label_generator.cli.main())
