# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------


class Result(object):
    """Outcome of a completed client operation.

    :ivar code: Status code of the operation, 200 when it succeeded.
    """

    def __init__(self, code=None):
        self.code = code

    def __eq__(self, other):
        return isinstance(other, Result) and other.code == self.code

    def __repr__(self):
        return "Result(code={!r})".format(self.code)
