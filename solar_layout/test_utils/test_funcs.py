# This file is part of the solar wizard PV suitability model, copyright © Centre for Sustainable Energy, 2020-2023
# Licensed under the Reciprocal Public License v1.5. See LICENSE for licensing details.
import json
import unittest
from os.path import join
from typing import List

from solar_layout import paths


class ParameterisedTestCase(unittest.TestCase):
    def parameterised_test(self, mapping: List[tuple], fn, delta: float = None):
        """
        Run `fn` over each `(*inputs, expected)` tuple as a subtest. If `delta` is
        given, numeric results only have to be within `delta` of the expected value.
        """
        for tup in mapping:
            inputs = tup[:-1]
            expected = tup[-1]
            try:
                actual = fn(*inputs)
            except Exception as e:
                print(e)
                actual = e
            test_name = str(inputs)[:100] if len(inputs) > 1 else str(inputs[0])[:100]
            with self.subTest(test_name):
                if delta is not None and isinstance(expected, (int, float)) and isinstance(actual, (int, float)):
                    assert abs(expected - actual) <= delta, \
                        f"\nExpected: {expected} (+/- {delta})\nActual  : {actual}\nInputs : {inputs}"
                else:
                    assert expected == actual, f"\nExpected: {expected}\nActual  : {actual}\nInputs : {inputs}"


def load_test_json(*path: str):
    with open(join(paths.TEST_DATA, *path)) as f:
        return json.load(f)
