#!/usr/bin/env python
#    mirrorxmltest/documenttest.py - test cases for the mirrorxml document layer
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
import os, shutil, tempfile, unittest
from pathlib import Path

from mirrorxml import ParseError
from mirrorxml import document

__version__ = "0.1"

CANONICAL = ( b'<?xml version="1.0" encoding="UTF-8" standalone="no"?>\r\n'
    b'<Root>\r\n'
    b'  <A>1</A>\r\n'
    b'  <B/>\r\n'
    b'  <C>\r\n'
    b'    <D>two words</D>\r\n'
    b'  </C>\r\n'
    b'</Root>\r\n' )

class DocumentTests ( unittest.TestCase ) :
    def testStripWhitespace ( self ) :
        """Whitespace-only text is dropped when parsing"""
        root = document.parse_string( b"<a>\r\n  <b>x</b>\r\n\t<c> \n</c>\r\n</a>" ).getroot()
        assert root.text is None
        assert [ ( e.tag, e.text, e.tail ) for e in root ] == [ ( "b", "x", None ), ( "c", None, None ) ]

    def testKeepText ( self ) :
        """Text with content keeps its surrounding spaces"""
        root = document.parse_string( "<a> x </a>" ).getroot()
        assert root.text == " x "

    def testWrite ( self ) :
        """Indentation, empty elements and the declaration"""
        tree = document.new_tree( "Root" )
        document.append( tree.getroot(), "A" ).text = "1"
        document.append( tree.getroot(), "B" ).text = ""
        c = document.append( tree.getroot(), "C" )
        document.append( c, "D" ).text = "two words"
        assert document.tostring( tree ) == CANONICAL
        assert document.tostring( tree.getroot() ) == CANONICAL

    def testRewrite ( self ) :
        """Parsing and writing a canonical document gives the same bytes"""
        assert document.tostring( document.parse_string( CANONICAL ) ) == CANONICAL

    def testWriteStream ( self ) :
        """write sends the bytes to a stream"""
        import io
        f = io.BytesIO()
        document.write( document.parse_string( CANONICAL ), f )
        assert f.getvalue() == CANONICAL

    def testEscaping ( self ) :
        """Markup characters in text are escaped"""
        tree = document.new_tree( "T" )
        tree.getroot().text = "a & b < c > d"
        assert b"<T>a &amp; b &lt; c &gt; d</T>" in document.tostring( tree )
        assert document.parse_string( document.tostring( tree ) ).getroot().text == "a & b < c > d"

    def testCarriageReturn ( self ) :
        """Carriage returns in text survive a round trip"""
        tree = document.new_tree( "T" )
        tree.getroot().text = "one\r\ntwo"
        data = document.tostring( tree )
        assert b"one&#13;\ntwo" in data
        assert document.parse_string( data ).getroot().text == "one\r\ntwo"

    def testAttributesWritten ( self ) :
        """Attributes already on a tree are written in name order"""
        tree = document.new_tree( "T" )
        tree.getroot().set( "z", "1" )
        tree.getroot().set( "a", 'say "hi"' )
        assert b"<T a='say \"hi\"' z=\"1\"/>" in document.tostring( tree )

    def testQuery ( self ) :
        """A single name selects direct children only"""
        root = document.parse_string( "<m><str>a</str><int>1</int><x><str>deep</str></x><str>b</str></m>" ).getroot()
        assert [ e.text for e in document.query( root, "str" ) ] == [ "a", "b" ]
        assert document.query( root, "missing" ) == []

    def testQueryAlternation ( self ) :
        """Several names select matching children in document order"""
        root = document.parse_string( "<m><str>a</str><int>1</int><x><str>deep</str></x><str>b</str></m>" ).getroot()
        assert [ e.text for e in document.query( root, "str", "int" ) ] == [ "a", "1", "b" ]

    def testAttribute ( self ) :
        """Attribute values, with an empty string for missing ones"""
        root = document.parse_string( '<a id="7"/>' ).getroot()
        assert document.attribute( root, "id" ) == "7"
        assert document.attribute( root, "name" ) == ""

    def testMalformed ( self ) :
        """Broken XML is a parse error"""
        with self.assertRaises( ParseError ) :
            document.parse_string( b"<a><b></a>" )
        with self.assertRaises( ParseError ) :
            document.parse_string( b"" )

    def testEntityExpansion ( self ) :
        """Entity declarations are refused"""
        bomb = ( b'<?xml version="1.0"?>\n<!DOCTYPE lolz [\n <!ENTITY lol "lol">\n'
            b' <!ENTITY lol2 "&lol;&lol;&lol;&lol;&lol;&lol;&lol;&lol;&lol;&lol;">\n]>\n<lolz>&lol2;</lolz>' )
        with self.assertRaises( ParseError ) :
            document.parse_string( bomb )

    def testExternalEntity ( self ) :
        """External entities are never fetched"""
        data = b'<!DOCTYPE a [<!ENTITY x SYSTEM "file:///etc/passwd">]><a>&x;</a>'
        with self.assertRaises( ParseError ) :
            document.parse_string( data )

    def testDoctype ( self ) :
        """A plain document type declaration is harmless"""
        assert document.parse_string( b"<!DOCTYPE a><a>1</a>" ).getroot().text == "1"

    def testParseFile ( self ) :
        """Documents can be read from a path"""
        directory = tempfile.mkdtemp()
        try :
            name = Path( directory ) / "doc.xml"
            with open( name, 'wb' ) as f :
                f.write( CANONICAL )
            assert document.tostring( document.parse( name ) ) == CANONICAL
            assert document.parse( os.fspath( name ) ).getroot().tag == "Root"
            with self.assertRaises( OSError ) :
                document.parse( Path( directory ) / "missing.xml" )
        finally :
            shutil.rmtree( directory )

if __name__ == "__main__":
    unittest.main()
