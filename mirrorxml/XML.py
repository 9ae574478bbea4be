#    mirrorxml/XML.py - XML persistence for mirrorxml.
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
r"""mirrorxml/XML.py is the serialization/deserialization interface of :mod:`mirrorxml`.
It provides functions similar to those found in :mod:`pickle` or :mod:`json`; the
difference is that loading needs to be told which type to build.

    dumps( obj ) -> bytes               loads( data, kind ) -> obj
    dump( obj, f )                      load( f, kind ) -> obj
    serialize( sink, obj )              deserialize( source, kind ) -> obj
    marshal( obj ) -> ElementTree       unmarshal( tree, kind ) -> obj

``serialize`` and ``deserialize`` accept either a file name (or ``os.PathLike``)
or a binary file-like object.  Keyword arguments are passed on to
:class:`~mirrorxml.MirrorEncoder` (``scalars``) or :class:`~mirrorxml.MirrorDecoder`
(``scalars``, ``strict_maps``).

A ``Person`` with an address and a list of books is written as::

    <?xml version="1.0" encoding="UTF-8" standalone="no"?>
    <Person>
      <FirstName>Sherlock</FirstName>
      <Age>164</Age>
      <BirthDate>-3660163200000</BirthDate>
      <Address>
        <Street>221B Baker Street</Street>
      </Address>
      <Books>
        <Book>
          <Title>The Sign of Four</Title>
        </Book>
      </Books>
    </Person>

The elements used in the representation are:

    <ClassName>...</ClassName> - the document root, named after the class of the marshalled object.

    <FieldName>...</FieldName> - a field of an object, named after the field in UpperCamelCase.
        contains the text of a scalar, the fields of an object, or the items of a container.
        fields holding None are left out.

    <ItemClass>...</ItemClass> - an item of a tuple, list, set or similar, named after the item's class.

    <KeyClass>...</KeyClass><ValueClass>...</ValueClass> - an entry of a dict, as two adjacent elements.

Lines end with CRLF and are indented by two spaces; no attributes are written.
"""
import logging, os

from mirrorxml import MirrorEncoder, MirrorDecoder
from mirrorxml import document

__version__ = "0.1"
__all__ = [ 'marshal', 'unmarshal', 'dumps', 'dump', 'loads', 'load', 'serialize', 'deserialize' ]

logger = logging.getLogger( __name__ )

def marshal ( obj, **config ) :
    r"""Prepares the passed object ``obj`` for expression as XML output."""
    return MirrorEncoder( **config ).marshal( obj )

def unmarshal ( xmldoc, kind, **config ) :
    r"""Translates the passed XML etree ``xmldoc`` into an instance of ``kind``."""
    return MirrorDecoder( **config ).unmarshal( xmldoc, kind )

def dumps ( o, **config ) :
    r"""Dump the passed object ``o`` (and its referred object graph) as XML which
    is returned as bytes."""
    return document.tostring( marshal( o, **config ) )

def dump ( o, f, **config ) :
    r"""Dump the passed object ``o`` (and its referred object graph) as XML which
    is written to the binary file-like object ``f`` (which has a .write method)."""
    document.write( marshal( o, **config ), f )

def loads ( s, kind, **config ) :
    r"""Convert the passed XML document ``s`` (bytes or str) back into an instance
    of ``kind``."""
    return unmarshal( document.parse_string( s ), kind, **config )

def load ( f, kind, **config ) :
    r"""Read an XML document from the binary file-like object ``f`` (or the file
    named ``f``) and convert it back into an instance of ``kind``."""
    return unmarshal( document.parse( f ), kind, **config )

def _is_path ( target ) :
    return isinstance( target, ( str, bytes, os.PathLike ) )

def serialize ( sink, obj, **config ) :
    r"""Write ``obj`` as a complete XML document to ``sink``, a file name or a
    binary file-like object."""
    tree = marshal( obj, **config )
    if _is_path( sink ) :
        logger.debug( "writing %s to %s", type( obj ).__name__, os.fsdecode( sink ) )
        with open( sink, 'wb' ) as f :
            document.write( tree, f )
    else :
        document.write( tree, sink )

def deserialize ( source, kind, **config ) :
    r"""Read a complete XML document from ``source``, a file name or a binary
    file-like object, and return the instance of ``kind`` it describes."""
    if _is_path( source ) :
        logger.debug( "reading %s from %s", getattr( kind, '__name__', kind ), os.fsdecode( source ) )
    return load( source, kind, **config )
