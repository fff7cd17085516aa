# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Custom exceptions for pdfcjk."""


class PdfCjkError(Exception):
    """Base exception for all pdfcjk errors."""


class FontLoadError(PdfCjkError):
    """Font could not be loaded."""


class ResourceUnavailableError(FontLoadError):
    """CMap resource is missing or unreadable."""


class MalformedWidthTableError(FontLoadError):
    """Compact width table does not follow the width grammar."""


class UnknownFontProfileError(PdfCjkError):
    """No metric profile exists for the requested language and style."""
