#!/usr/bin/env python
#    mirrorxmltest/xmltest.py - test cases for mirrorxml over XML documents
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
import io, os, shutil, tempfile, unittest
from datetime import datetime, timezone

from mirrorxml import ConversionError, ParseError, SchemaError
from mirrorxml.XML import dump, dumps, load, loads, marshal, unmarshal, serialize, deserialize
import mirrorxmltest
from mirrorxmltest import BIRTH_DATE, Person, sherlock

__version__ = "0.1"

MILLIS = int( ( BIRTH_DATE - datetime( 1970, 1, 1, tzinfo = timezone.utc ) ).total_seconds() ) * 1000

SHERLOCK = ( '<?xml version="1.0" encoding="UTF-8" standalone="no"?>\r\n'
    '<Person>\r\n'
    '  <FirstName>Sherlock</FirstName>\r\n'
    '  <LastName>Holmes</LastName>\r\n'
    '  <Gender>MALE</Gender>\r\n'
    '  <Age>164</Age>\r\n'
    '  <BirthDate>%d</BirthDate>\r\n'
    '  <IsDetective>true</IsDetective>\r\n'
    '  <Address>\r\n'
    '    <Street>221B Baker Street</Street>\r\n'
    '    <City>London</City>\r\n'
    '  </Address>\r\n'
    '  <Books>\r\n'
    '    <Book>\r\n'
    '      <Title>The Hound of the Baskervilles</Title>\r\n'
    '    </Book>\r\n'
    '    <Book>\r\n'
    '      <Title>The Sign of Four</Title>\r\n'
    '    </Book>\r\n'
    '  </Books>\r\n'
    '</Person>\r\n' ) % MILLIS

class MirrorXMLTests ( mirrorxmltest.MirrorTests, unittest.TestCase ) :
    def setUp ( self ) :
        self.marshal = dumps
        self.unmarshal = loads

class MirrorTreeTests ( mirrorxmltest.MirrorTests, unittest.TestCase ) :
    def setUp ( self ) :
        self.marshal = marshal
        self.unmarshal = unmarshal

class SherlockTests ( unittest.TestCase ) :
    def testSerialization ( self ) :
        """The document is written byte for byte as expected"""
        assert dumps( sherlock() ) == SHERLOCK.encode( 'utf-8' )

    def testDeterministic ( self ) :
        """Writing the same object twice gives the same bytes"""
        assert dumps( sherlock() ) == dumps( sherlock() )

    def testDeserialization ( self ) :
        """Reading the document gives back an equal person, without the transient id"""
        result = loads( SHERLOCK, Person )
        assert result == sherlock()
        assert result.id == 1
        assert result.birth_date == BIRTH_DATE
        assert [ book.title for book in result.books ] == [ "The Hound of the Baskervilles", "The Sign of Four" ]

    def testWrongRootNode ( self ) :
        """A root element not named after the type is rejected"""
        with self.assertRaises( SchemaError ) :
            loads( SHERLOCK.replace( "Person", "P" ), Person )

    def testMissingElement ( self ) :
        """A missing element leaves the field at its default and the rest untouched"""
        result = loads( SHERLOCK.replace( "  <FirstName>Sherlock</FirstName>\r\n", "", 1 ), Person )
        assert result != sherlock()
        assert result.first_name == ""
        assert result.last_name == "Holmes"
        result.first_name = "Sherlock"
        assert result == sherlock()

    def testInvalidNumber ( self ) :
        """Text that is not a number fails in a number field"""
        with self.assertRaises( ConversionError ) as caught :
            loads( SHERLOCK.replace( "<Age>164</Age>", "<Age>old</Age>" ), Person )
        assert isinstance( caught.exception.__cause__, ValueError )

    def testInvalidEnum ( self ) :
        """An unknown enum literal fails"""
        with self.assertRaises( ConversionError ) :
            loads( SHERLOCK.replace( "<Gender>MALE</Gender>", "<Gender>UNKNOWN</Gender>" ), Person )

    def testInvalidValues ( self ) :
        """Both failures at once still give a conversion error"""
        data = SHERLOCK.replace( "<Age>164</Age>", "<Age>old</Age>" ).replace( "<Gender>MALE</Gender>", "<Gender>UNKNOWN</Gender>" )
        with self.assertRaises( ConversionError ) :
            loads( data, Person )

    def testMalformed ( self ) :
        """Broken XML is a parse error"""
        with self.assertRaises( ParseError ) :
            loads( SHERLOCK.replace( "</Person>", "" ), Person )

    def testStreams ( self ) :
        """dump and load work on binary streams"""
        f = io.BytesIO()
        dump( sherlock(), f )
        assert f.getvalue() == SHERLOCK.encode( 'utf-8' )
        f.seek( 0 )
        assert load( f, Person ) == sherlock()

    def testFiles ( self ) :
        """serialize and deserialize accept file names and streams"""
        directory = tempfile.mkdtemp()
        try :
            name = os.path.join( directory, "person.xml" )
            serialize( name, sherlock() )
            with open( name, 'rb' ) as f :
                assert f.read() == SHERLOCK.encode( 'utf-8' )
            assert deserialize( name, Person ) == sherlock()
            with open( name, 'rb' ) as f :
                assert deserialize( f, Person ) == sherlock()
        finally :
            shutil.rmtree( directory )

    def testMissingFile ( self ) :
        """I/O failures are passed through"""
        with self.assertRaises( OSError ) :
            deserialize( os.path.join( tempfile.gettempdir(), "no-such-dir-for-mirrorxml", "person.xml" ), Person )

    def testUnwritableText ( self ) :
        """Text XML cannot carry is refused instead of giving a broken document"""
        for name in ( "bell\x07", "nul\x00", "form\x0c", "half \ud800" ) :
            with self.assertRaises( ConversionError ) as caught :
                dumps( Person( first_name = name, birth_date = BIRTH_DATE ) )
            assert "cannot write" in str( caught.exception )
        f = io.BytesIO()
        with self.assertRaises( ConversionError ) :
            dump( Person( last_name = "\x1b[0m", birth_date = BIRTH_DATE ), f )
        assert f.getvalue() == b""
        data = Person( first_name = "tab\there", last_name = "\U0001f50e", birth_date = BIRTH_DATE )
        assert loads( dumps( data ), Person ) == data

if __name__ == "__main__":
    unittest.main()
