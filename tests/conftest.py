# Copyright 2026 Dell Inc. or its subsidiaries. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Shared pytest fixtures."""

import pytest

from common import logging_utils


@pytest.fixture(autouse=True)
def build_log_base(tmp_path_factory):
    """Route per-build log files to a temporary directory."""
    previous = logging_utils.get_log_base()
    log_base = tmp_path_factory.mktemp("build-logs")
    logging_utils.configure_log_base(log_base)
    yield log_base
    logging_utils.configure_log_base(previous)
