"""Shared LCOV fixtures."""

import pytest

SAMPLE_LCOV = """\
TN:
SF:/work/repo/src/a.js
FN:1,alpha
FN:5,beta
FNDA:3,alpha
FNDA:0,beta
FNF:2
FNH:1
DA:1,1
DA:2,0
DA:3,1
LF:3
LH:2
BRDA:2,0,0,1
BRDA:2,0,1,-
BRF:2
BRH:1
end_of_record
SF:/work/repo/src/b.js
DA:1,5
DA:2,5
end_of_record
"""


@pytest.fixture
def sample_lcov() -> str:
    return SAMPLE_LCOV
