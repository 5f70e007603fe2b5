import matplotlib

matplotlib.use("Agg")

import pytest

# Shape of a real R6 line (ydata-fp-td-clicks-v1_0.20090501), shortened to 3 articles.
R6_LINE = (
    "1241160900 109513 0 |user 2:0.000012 3:0.000000 4:0.000006 5:0.000023 6:0.999958 1:1.000000 "
    "|109498 2:0.306008 3:0.000450 4:0.077048 5:0.230439 6:0.385937 1:1.000000 "
    "|109509 2:0.306008 3:0.000450 4:0.077048 5:0.230439 6:0.385937 1:1.000000 "
    "|109513 2:0.281035 3:0.000008 4:0.073669 5:0.238574 6:0.406714 1:1.000000"
)


@pytest.fixture
def r6_line() -> str:
    return R6_LINE
