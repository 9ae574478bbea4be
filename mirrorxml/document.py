#    mirrorxml/document.py - XML document input/output for mirrorxml.
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
r"""Reading, writing and querying the XML documents produced by :mod:`mirrorxml`.

Documents are plain :mod:`xml.etree.ElementTree` trees.  Parsing goes through
:mod:`defusedxml` so that untrusted input cannot expand entities or make the
parser fetch external resources, and whitespace-only text is dropped afterwards
so that an element holding only child elements has no text at all.

Output is produced by a small pretty printer rather than ``ElementTree.write``
because the byte layout is fixed: a ``standalone="no"`` declaration, two-space
indentation and CRLF line endings.  The same tree always gives the same bytes.
"""
import logging, os
import xml.etree.ElementTree as ET
from xml.sax.saxutils import escape, quoteattr

import defusedxml
import defusedxml.ElementTree as DET

from mirrorxml.errors import ParseError

__all__ = [ 'parse', 'parse_string', 'write', 'tostring', 'query', 'attribute', 'strip_whitespace', 'DECLARATION' ]

logger = logging.getLogger( __name__ )

DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="no"?>'
NEWLINE = '\r\n'
INDENT = '  '
XML_WHITESPACE = ' \t\r\n'

# carriage returns would be folded into newlines by any parser reading the text back.
text_entities = { '\r' : '&#13;' }

def parse ( source ) :
    r"""Parse the document in ``source`` (a file name, path or binary file-like
    object) and return it as an ``ElementTree`` with whitespace-only text removed."""
    if isinstance( source, os.PathLike ) :
        source = os.fspath( source )
    try :
        tree = DET.parse( source )
    except ( ET.ParseError, defusedxml.DefusedXmlException ) as ex :
        raise ParseError( "malformed XML document: %s" % ex ) from ex
    strip_whitespace( tree.getroot() )
    return tree

def parse_string ( data ) :
    r"""Parse the document held in ``data`` (bytes, or str which is taken as UTF-8)."""
    if isinstance( data, str ) :
        data = data.encode( 'utf-8' )
    try :
        root = DET.fromstring( data )
    except ( ET.ParseError, defusedxml.DefusedXmlException ) as ex :
        raise ParseError( "malformed XML document: %s" % ex ) from ex
    strip_whitespace( root )
    return ET.ElementTree( root )

def strip_whitespace ( root ) :
    r"""Remove all whitespace-only text (and tails) below and including ``root``."""
    for e in root.iter() :
        if e.text is not None and not e.text.strip( XML_WHITESPACE ) :
            e.text = None
        if e.tail is not None and not e.tail.strip( XML_WHITESPACE ) :
            e.tail = None
    return root

def pstring ( e, depth = 0 ) :
    """pretty string representation of an etree element"""
    rep = [ INDENT * depth, '<', e.tag ]
    for att in sorted( e.keys() ) :
        rep.append( ' {}={}'.format( att, quoteattr( e.get( att ) ) ) )
    if len( e ) == 0 :
        if not e.text :
            rep.append( '/>' )
        else :
            rep.append( '>{}</{}>'.format( escape( e.text, text_entities ), e.tag ) )
    else :
        rep.append( '>' + NEWLINE )
        for sube in e :
            rep.append( pstring( sube, depth + 1 ) )
        rep.append( '{}</{}>'.format( INDENT * depth, e.tag ) )
    rep.append( NEWLINE )
    return ''.join( rep )

def tostring ( tree ) :
    r"""Serialize ``tree`` (an ``ElementTree`` or root ``Element``) to UTF-8 bytes."""
    root = tree.getroot() if isinstance( tree, ET.ElementTree ) else tree
    return ( DECLARATION + NEWLINE + pstring( root ) ).encode( 'utf-8' )

def write ( tree, f ) :
    r"""Write ``tree`` to the binary file-like object ``f`` (which has a .write method)."""
    data = tostring( tree )
    f.write( data )
    logger.debug( "wrote %d bytes", len( data ) )

def query ( node, *names ) :
    r"""Return the children of ``node`` selected by ``names`` in document order.

    A single name is an ElementTree path (usually just a tag, e.g. ``"Title"``).
    Several names select every direct child whose tag is any of them, the
    equivalent of ``*[name()='A' or name()='B']``."""
    if len( names ) == 1 :
        return node.findall( names[0] )
    wanted = frozenset( names )
    return [ child for child in node if child.tag in wanted ]

def attribute ( node, name ) :
    r"""Return the value of attribute ``name`` on ``node``; an empty string if absent."""
    return node.get( name, "" )

def new_tree ( tag ) :
    r"""Start a fresh document whose root element is ``tag``."""
    return ET.ElementTree( ET.Element( tag ) )

def append ( parent, tag ) :
    return ET.SubElement( parent, tag )
