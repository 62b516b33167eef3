# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
from os.path import abspath, dirname, join

current_dir = abspath(dirname(__file__))

PROJECT_ROOT = abspath(join(current_dir, ".."))
TEST_DATA = abspath(join(PROJECT_ROOT, "testdata"))
