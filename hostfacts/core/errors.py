# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Engine-level error types shared across modules."""


class ConfigurationError(ValueError):
    """Raised for invalid definition, aggregate or chunk configuration.

    Covers unknown options, malformed chunk registration, references to
    unknown chunks and deep-merge conflicts in the default combinator.
    """
    pass
