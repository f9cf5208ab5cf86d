# Copyright 2010-2025 Google LLC
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

"""Configures the solving of an optimization problem."""

import dataclasses
import datetime
from typing import Optional


@dataclasses.dataclass
class SolveParameters:
    """Parameters to control a single solve.

    See solve() in solver.py for how they are passed to a Solver.

    Attributes:
      enable_output: If the solver should print out its log messages.
      time_limit: The maximum time a solver should spend on the problem, or if
        None, then the time limit is infinite. This value is not a hard limit,
        solve time may slightly exceed this value.
    """

    enable_output: bool = False
    time_limit: Optional[datetime.timedelta] = None

    def time_limit_seconds(self) -> Optional[float]:
        """Returns the time limit in seconds, or None if there is no limit.

        Raises:
          ValueError: if the time limit is negative.
        """
        if self.time_limit is None:
            return None
        seconds = self.time_limit.total_seconds()
        if seconds < 0:
            raise ValueError(f"time_limit must be non negative, got {self.time_limit}")
        return seconds
