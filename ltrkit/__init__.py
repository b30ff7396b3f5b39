#!/usr/bin/env python3
"""
ltrkit - Letter Transition Record Toolkit
=========================================

Reads, repairs, builds and samples the .ltr Markov tables that the NWN
GetRandomName() function uses to make up names.

Quick Start
-----------
    import random
    from ltrkit import build_table, read_table, repair_table, sample_word

    table = build_table(["Aribeth", "Fenthick", "Desther"])

    table = repair_table(read_table("human_male.ltr"))
    rng = random.Random(42)
    names = [sample_word(table, rng) for _ in range(10)]

Modules
-------
    ltrkit.alphabet - symbol <-> index codec
    ltrkit.table    - in-memory tables and the binary format
    ltrkit.repair   - fix for the known singles-table corruption
    ltrkit.builder  - train a table from names
    ltrkit.sampler  - generate names from a table
    ltrkit.printer  - human readable listing

CLI Usage
---------
    python -m ltrkit -g 20 human_male.ltr
    python -m ltrkit -b elves.ltr < elves.txt
"""

__version__ = "1.0.0"
__author__ = "ltrkit"

from .alphabet import Alphabet, DEFAULT_ALPHABET, LETTERS
from .config import LtrConfig, default_config
from .errors import LtrError, FormatError, TruncatedDataError, SamplingError
from .table import (
    Cdf,
    LtrTable,
    MAGIC,
    load_table,
    serialize_table,
    read_table,
    write_table,
)
from .repair import RepairReport, detect_corruption, repair_table
from .builder import TableBuilder, build_table, iter_words
from .sampler import NameSampler, SampleState, make_rng, sample_word
from .printer import format_table

__all__ = [
    # Alphabet
    'Alphabet',
    'DEFAULT_ALPHABET',
    'LETTERS',
    # Config
    'LtrConfig',
    'default_config',
    # Errors
    'LtrError',
    'FormatError',
    'TruncatedDataError',
    'SamplingError',
    # Tables
    'Cdf',
    'LtrTable',
    'MAGIC',
    'load_table',
    'serialize_table',
    'read_table',
    'write_table',
    # Repair
    'RepairReport',
    'detect_corruption',
    'repair_table',
    # Building
    'TableBuilder',
    'build_table',
    'iter_words',
    # Sampling
    'NameSampler',
    'SampleState',
    'make_rng',
    'sample_word',
    # Printing
    'format_table',
]
