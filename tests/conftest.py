import os

import pytest

from pre_wgsl.macros import MacroTable, Precedence

SHADER_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "shaders")

@pytest.fixture
def shader_dir():
    return SHADER_DIR

@pytest.fixture
def macros():
    table = MacroTable()
    table.define("NUM_THREADS", "64")
    table.define("BLOCKS", "4")
    table.define("FLAG")
    table.define("NEGATIVE", "-3")
    table.define("TYPE", "vec4<u32>", Precedence.GLOBAL_OPTION)
    return table
