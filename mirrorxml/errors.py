#    mirrorxml/errors.py - error types raised by mirrorxml.
#    Copyright (C) 2009 Shawn Sulma <genosha@470th.org>
#
#    This program is free software: you can redistribute it and/or modify
#    it under the terms of the GNU General Public License as published by
#    the Free Software Foundation, either version 3 of the License, or
#    (at your option) any later version.
#
#    This program is distributed in the hope that it will be useful,
#    but WITHOUT ANY WARRANTY; without even the implied warranty of
#    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#    GNU General Public License for more details.
#
#    You should have received a copy of the GNU General Public License
#    along with this program.  If not, see <http://www.gnu.org/licenses/>.
r"""Exceptions raised by :mod:`mirrorxml`.

Every failure in an encode or decode pass aborts the whole call and surfaces to
the caller of :func:`mirrorxml.XML.dump` / :func:`mirrorxml.XML.load` (or their
siblings).  The classes also derive from the builtin exception a caller would
expect (``ValueError`` for bad data, ``TypeError`` for bad types) so that code
written against :mod:`pickle` or :mod:`json` keeps catching them.

I/O failures are left as the ``OSError`` raised by the file or stream.
"""

class MirrorXMLError ( Exception ) :
    r"""Base class of all mirrorxml errors."""

class ParseError ( MirrorXMLError, ValueError ) :
    r"""The input is not well-formed XML, or uses forbidden constructs (entity
    declarations, external references)."""

class SchemaError ( MirrorXMLError, ValueError ) :
    r"""The document does not have the expected shape, e.g. the root element is
    not named after the requested type."""

class ConversionError ( MirrorXMLError, ValueError ) :
    r"""Scalar text could not be converted to (or from) its type.  The original
    failure is chained as ``__cause__``."""

class InstantiationError ( MirrorXMLError, TypeError ) :
    r"""A type cannot be constructed without arguments."""

class UnsupportedTypeError ( MirrorXMLError, TypeError ) :
    r"""A type (or value) cannot be represented by mirrorxml at all."""
