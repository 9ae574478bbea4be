#    mirrorxml/scalars.py - scalar text conversions for mirrorxml.
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
r"""The closed table of scalar types understood by :mod:`mirrorxml`.

A scalar is any value written as the text content of a single element.  Each
supported type has an entry holding a pair of functions: ``encode( value )``
returning the text, and ``decode( kind, text )`` building a value of the
declared ``kind`` from the text.  Lookups walk the type's MRO, so subclasses of
a registered type (``pathlib.PosixPath``, ``str`` subclasses) share its entry.
Enumerations are matched before anything they mix in, and are written by
member name.

Dates and datetimes are written as integer milliseconds since the Unix epoch.
This is lossless to the millisecond and does not depend on locale.  Naive
datetimes are taken to be UTC; decoded datetimes are always UTC-aware.
Durations (``timedelta``) are integer milliseconds too; times of day are ISO
8601 text (``09:30:00``), keeping any UTC offset.

Text holding characters that XML 1.0 cannot carry (most control characters,
lone surrogates) is refused with a :class:`ConversionError` when writing.

Types without an entry are not scalars.  Further types can be added with
:func:`register_scalar` (for the default table) or on a private
:class:`ScalarRegistry` handed to the encoder/decoder.
"""
import base64, binascii, decimal, inspect, re, uuid
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from pathlib import PurePath

from mirrorxml.errors import ConversionError, UnsupportedTypeError

__all__ = [ 'ScalarRegistry', 'default_registry', 'register_scalar', 'EPOCH' ]

EPOCH = datetime( 1970, 1, 1, tzinfo = timezone.utc )
MILLISECOND = timedelta( milliseconds = 1 )

# failures a conversion function may raise for bad input.
conversion_errors = ( ValueError, TypeError, KeyError, ArithmeticError, binascii.Error )

# complement of the XML 1.0 Char production.
illegal_xml_chars = re.compile( r"[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]" )

def _bool_text ( value ) :
    return "true" if value else "false"

def _text_bool ( kind, text ) :
    lowered = text.strip().lower()
    if lowered == "true" :
        return True
    if lowered == "false" :
        return False
    raise ValueError( "not a boolean: %r" % text )

def _datetime_text ( value ) :
    if value.tzinfo is None :
        value = value.replace( tzinfo = timezone.utc )
    return str( ( value - EPOCH ) // MILLISECOND )

def _text_datetime ( kind, text ) :
    return EPOCH + int( text ) * MILLISECOND

def _date_text ( value ) :
    return _datetime_text( datetime( value.year, value.month, value.day, tzinfo = timezone.utc ) )

def _text_date ( kind, text ) :
    return _text_datetime( kind, text ).date()

def _timedelta_text ( value ) :
    return str( value // MILLISECOND )

def _text_timedelta ( kind, text ) :
    return int( text ) * MILLISECOND

def _text_time ( kind, text ) :
    return time.fromisoformat( text.strip() )

def _construct ( kind, text ) :
    return kind( text )

def _enum_by_name ( kind, text ) :
    return kind[ text ]

class ScalarRegistry ( object ) :
    r"""Maps scalar types to their ``( encode, decode )`` function pair."""

    def __init__ ( self, entries = None ) :
        self.entries = dict( entries or () )

    def register ( self, kind, encode = str, decode = _construct ) :
        r"""Make ``kind`` (and its subclasses) a scalar.  ``encode`` turns a value
        into text; ``decode`` receives the declared type and the text."""
        if not inspect.isclass( kind ) :
            raise TypeError( "scalar kinds must be classes, not %r" % ( kind, ) )
        self.entries[ kind ] = ( encode, decode )

    def copy ( self ) :
        return ScalarRegistry( self.entries )

    def find ( self, kind ) :
        r"""Return the ``( encode, decode )`` pair used for ``kind``, or None if
        ``kind`` is not a scalar type."""
        if not inspect.isclass( kind ) :
            return None
        if issubclass( kind, Enum ) and Enum in self.entries :
            return self.entries[ Enum ]
        for base in inspect.getmro( kind ) :
            if base in self.entries :
                return self.entries[ base ]
        return None

    def __contains__ ( self, kind ) :
        return self.find( kind ) is not None

    def encode ( self, value ) :
        entry = self.find( type( value ) )
        if entry is None :
            raise UnsupportedTypeError( "'%s' is not a supported scalar type." % type( value ).__name__ )
        try :
            text = entry[0]( value )
        except conversion_errors as ex :
            raise ConversionError( "cannot write %r as text: %s" % ( value, ex ) ) from ex
        bad = illegal_xml_chars.search( text )
        if bad is not None :
            raise ConversionError( "cannot write %r as text: character %r at %d is not allowed in XML" % ( value, bad.group(), bad.start() ) )
        return text

    def decode ( self, kind, text ) :
        entry = self.find( kind )
        if entry is None :
            raise UnsupportedTypeError( "'%s' is not a supported scalar type." % getattr( kind, '__name__', kind ) )
        try :
            return entry[1]( kind, text )
        except conversion_errors as ex :
            raise ConversionError( "cannot convert %r to %s: %s" % ( text, kind.__name__, ex ) ) from ex

default_registry = ScalarRegistry()
default_registry.register( bool, _bool_text, _text_bool )
for _kind in ( int, float, complex, decimal.Decimal, str, uuid.UUID, PurePath ) :
    default_registry.register( _kind )
default_registry.register( bytes, lambda value : base64.b64encode( value ).decode( 'ascii' ),
    lambda kind, text : kind( base64.b64decode( text, validate = True ) ) )
default_registry.register( datetime, _datetime_text, _text_datetime )
default_registry.register( date, _date_text, _text_date )
default_registry.register( time, time.isoformat, _text_time )
default_registry.register( timedelta, _timedelta_text, _text_timedelta )
default_registry.register( Enum, lambda value : value.name, _enum_by_name )
del _kind

def register_scalar ( kind, encode = str, decode = _construct ) :
    r"""Add ``kind`` to the default scalar table.  See :meth:`ScalarRegistry.register`."""
    default_registry.register( kind, encode, decode )
