#!/usr/bin/env python
#    mirrorxmltest/shapetest.py - test cases for type classification and decoding rules
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
import unittest
from collections import OrderedDict, defaultdict, deque
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from fractions import Fraction
from pathlib import Path, PurePosixPath
from typing import Any, NamedTuple, Optional

from mirrorxml import ( Shape, classify, fields_of, tag_for, simple_name, element_types, ScalarRegistry
    , ConversionError, InstantiationError, SchemaError, UnsupportedTypeError )
from mirrorxml.scalars import default_registry
from mirrorxml.XML import dumps, loads
from mirrorxmltest import ( Address, Book, BookList, Catalogue, Detective, Gender, Legacy, Level, Loose, Person
    , Point, Range, Scores, Shelf, Tally )

__version__ = "0.1"

class ShapeTests ( unittest.TestCase ) :
    def testScalarShapes ( self ) :
        """Numbers, text, dates, paths and enums are scalars"""
        for kind in ( bool, int, float, complex, Decimal, str, bytes, datetime, date, time, timedelta, Path, PurePosixPath, Gender, Level, Optional[int], int | None ) :
            assert classify( kind ) is Shape.SCALAR, kind

    def testContainerShapes ( self ) :
        """Tuples are sequences, dicts maps, other collections collections"""
        assert classify( tuple[int, ...] ) is Shape.SEQUENCE
        assert classify( tuple ) is Shape.SEQUENCE
        for kind in ( dict, dict[str, int], OrderedDict[str, int], defaultdict, Mapping[str, int] ) :
            assert classify( kind ) is Shape.MAP, kind
        for kind in ( list, list[int], set[str], frozenset[str], deque[int], BookList, Sequence[int] ) :
            assert classify( kind ) is Shape.COLLECTION, kind

    def testObjectShapes ( self ) :
        """Everything else is an object"""
        for kind in ( Person, Address, Optional[Address], Tally, Marker ) :
            assert classify( kind ) is Shape.OBJECT, kind

    def testUnsupportedShapes ( self ) :
        """Types that cannot be represented"""
        import types
        for kind in ( Any, types.FunctionType, types.ModuleType, type, type( None ), type( iter( [] ) ), int | str, object, Fraction, Plain, Pair ) :
            with self.assertRaises( UnsupportedTypeError ) :
                classify( kind )

    def testSimpleName ( self ) :
        """Tags for types are unqualified class names"""
        assert simple_name( Person ) == "Person"
        assert simple_name( list[Book] ) == "list"
        assert simple_name( Optional[Address] ) == "Address"
        assert simple_name( BookList ) == "BookList"

    def testTagFor ( self ) :
        """Field names become UpperCamelCase tags"""
        assert tag_for( "firstName" ) == "FirstName"
        assert tag_for( "first_name" ) == "FirstName"
        assert tag_for( "is_detective" ) == "IsDetective"
        assert tag_for( "age" ) == "Age"
        assert tag_for( "_private" ) == "Private"
        assert tag_for( "URL" ) == "URL"

    def testFieldOrder ( self ) :
        """Fields follow declaration order, base class first"""
        assert [ f.tag for f in fields_of( Person ) ] == [ "Id", "FirstName", "LastName", "Gender", "Age", "BirthDate"
            , "IsDetective", "Address", "Books" ]
        assert [ f.name for f in fields_of( Detective ) ][-2:] == [ "books", "agency" ]

    def testTransientFields ( self ) :
        """Only fields annotated Transient are transient"""
        assert [ f.name for f in fields_of( Person ) if f.transient ] == [ "id" ]

    def testClassVars ( self ) :
        """Class variables are not fields"""
        assert [ f.name for f in fields_of( Tally ) ] == [ "hits", "label" ]

    def testElementTypes ( self ) :
        """Item types come from parameters or parameterized bases"""
        assert element_types( list[Book], 1 ) == [ Book ]
        assert element_types( tuple[int, ...], 1 ) == [ int ]
        assert element_types( dict[str, Book], 2 ) == [ str, Book ]
        assert element_types( BookList, 1 ) == [ Book ]
        assert element_types( Optional[list[int]], 1 ) == [ int ]
        for kind in ( list, dict, tuple[int, str] ) :
            with self.assertRaises( UnsupportedTypeError ) :
                element_types( kind, 2 if kind is dict else 1 )

    def testFieldlessClasses ( self ) :
        """Classes without declared fields are refused rather than written empty"""
        plain = Plain( "Mycroft" )
        with self.assertRaises( UnsupportedTypeError ) :
            dumps( plain )
        with self.assertRaises( UnsupportedTypeError ) :
            dumps( Holder( plain ) )
        with self.assertRaises( UnsupportedTypeError ) :
            loads( "<Holder><Item/></Holder>", Holder )
        assert loads( dumps( Marker() ), Marker ) == Marker()

    def testNamedTuples ( self ) :
        """Named tuples are refused on both sides"""
        with self.assertRaises( UnsupportedTypeError ) :
            dumps( Pair( 1, 2 ) )
        with self.assertRaises( UnsupportedTypeError ) :
            loads( "<Pair><int>1</int><int>2</int></Pair>", Pair )

    def testTagCollision ( self ) :
        """Fields that would share an element are refused"""
        with self.assertRaises( UnsupportedTypeError ) as caught :
            fields_of( Clash )
        assert "<X>" in str( caught.exception )
        with self.assertRaises( UnsupportedTypeError ) :
            dumps( Clash() )
        with self.assertRaises( UnsupportedTypeError ) :
            loads( "<Clash><X>1</X></Clash>", Clash )

class ScalarTests ( unittest.TestCase ) :
    def testBooleanText ( self ) :
        """Booleans are written in lower case and read case-insensitively"""
        assert default_registry.encode( True ) == "true"
        assert default_registry.encode( False ) == "false"
        assert default_registry.decode( bool, "TRUE" ) is True
        with self.assertRaises( ConversionError ) :
            default_registry.decode( bool, "yes" )

    def testDateText ( self ) :
        """Dates are epoch milliseconds"""
        assert default_registry.encode( datetime( 1970, 1, 1, 0, 0, 1, tzinfo = timezone.utc ) ) == "1000"
        assert default_registry.encode( datetime( 1970, 1, 1, 0, 0, 1 ) ) == "1000"
        assert default_registry.encode( date( 1970, 1, 2 ) ) == "86400000"
        assert default_registry.encode( datetime( 1969, 12, 31, 23, 59, 59, 999000, tzinfo = timezone.utc ) ) == "-1"
        assert default_registry.decode( datetime, "1000" ) == datetime( 1970, 1, 1, 0, 0, 1, tzinfo = timezone.utc )
        assert default_registry.decode( date, "86400000" ) == date( 1970, 1, 2 )
        with self.assertRaises( ConversionError ) :
            default_registry.decode( datetime, "yesterday" )

    def testTimeText ( self ) :
        """Times of day are ISO text, durations milliseconds"""
        assert default_registry.encode( time( 9, 30 ) ) == "09:30:00"
        assert default_registry.encode( timedelta( hours = 8 ) ) == "28800000"
        assert default_registry.encode( timedelta( milliseconds = -1 ) ) == "-1"
        assert default_registry.decode( time, "09:30:00.250000" ) == time( 9, 30, 0, 250000 )
        assert default_registry.decode( timedelta, "1500" ) == timedelta( seconds = 1.5 )
        with self.assertRaises( ConversionError ) :
            default_registry.decode( time, "half past nine" )
        data = Shift( start = time( 9, 30 ), length = timedelta( hours = 8 ) )
        xml = dumps( data )
        assert b"<Start>09:30:00</Start>" in xml
        assert b"<Length>28800000</Length>" in xml
        assert loads( xml, Shift ) == data

    def testEnumText ( self ) :
        """Enums, including int enums, are written by name"""
        assert default_registry.encode( Gender.MALE ) == "MALE"
        assert default_registry.encode( Level.HIGH ) == "HIGH"
        assert default_registry.decode( Level, "HIGH" ) is Level.HIGH
        with self.assertRaises( ConversionError ) :
            default_registry.decode( Gender, "male" )

    def testNumberText ( self ) :
        """Bad numbers are conversion errors"""
        for kind, text in ( ( int, "old" ), ( float, "" ), ( Decimal, "x" ), ( complex, "i" ), ( bytes, "!!" ) ) :
            with self.assertRaises( ConversionError ) :
                default_registry.decode( kind, text )

    def testUnregistered ( self ) :
        """Types outside the table are not scalars"""
        assert Fraction not in default_registry
        with self.assertRaises( UnsupportedTypeError ) :
            default_registry.encode( Fraction( 1, 3 ) )
        with self.assertRaises( UnsupportedTypeError ) :
            default_registry.decode( Fraction, "1/3" )

    def testPrivateRegistry ( self ) :
        """Extra scalar types on a private registry"""
        registry = default_registry.copy()
        registry.register( Fraction )
        data = Ratio( Fraction( 1, 3 ) )
        xml = dumps( data, scalars = registry )
        assert b"<Value>1/3</Value>" in xml
        assert loads( xml, Ratio, scalars = registry ) == data
        assert Fraction not in default_registry

class DecoderTests ( unittest.TestCase ) :
    def testValidation ( self ) :
        """validate_object runs after the fields are set"""
        result = loads( "<Range><Low>1</Low><High>5</High></Range>", Range )
        assert ( result.low, result.high, result.checked ) == ( 1, 5, True )
        with self.assertRaises( ValueError ) :
            loads( "<Range><Low>9</Low><High>5</High></Range>", Range )

    def testNoDefaultConstructor ( self ) :
        """Types needing constructor arguments cannot be read"""
        with self.assertRaises( InstantiationError ) :
            loads( "<Point><X>1</X><Y>2</Y></Point>", Point )

    def testAbstractCollection ( self ) :
        """Abstract container types cannot be read"""
        xml = dumps( Shelf( books = ( Book( "Memoirs" ), ) ) )
        assert b"<Book>" in xml
        with self.assertRaises( InstantiationError ) :
            loads( xml, Shelf )
        with self.assertRaises( InstantiationError ) :
            loads( "<Shelf><Index><str>a</str><int>1</int></Index></Shelf>", Shelf )

    def testUntypedFields ( self ) :
        """Fields without a usable declared type cannot be read"""
        assert loads( "<Loose/>", Loose ) == Loose()
        assert loads( "<Loose><Maybe>3</Maybe></Loose>", Loose ).maybe == 3
        for xml in ( "<Loose><Anything>1</Anything></Loose>", "<Loose><Either>1</Either></Loose>" ) :
            with self.assertRaises( UnsupportedTypeError ) :
                loads( xml, Loose )

    def testRootMismatch ( self ) :
        """The root element must be named after the requested type"""
        with self.assertRaises( SchemaError ) :
            loads( "<Book><Title>x</Title></Book>", Address )
        with self.assertRaises( SchemaError ) :
            loads( "<list><int>1</int></list>", tuple[int, ...] )

    def testDuplicateElements ( self ) :
        """A field matched by several elements keeps its default"""
        assert loads( "<Book><Title>A</Title><Title>B</Title></Book>", Book ).title == ""

    def testNestedElementsIgnored ( self ) :
        """Field elements are only looked up among direct children"""
        result = loads( "<Person><Address><FirstName>Mycroft</FirstName><City>London</City></Address></Person>", Person )
        assert result.first_name == ""
        assert result.address == Address( "", "London" )

    def testUnknownElementsIgnored ( self ) :
        """Elements that match no field are ignored"""
        assert loads( "<Book><Author>Doyle</Author><Title>Memoirs</Title></Book>", Book ) == Book( "Memoirs" )

    def testDeclaredItemType ( self ) :
        """Items are found by the declared item type's name only"""
        result = loads( "<Catalogue><Grid><list><int>1</int><bool>true</bool></list><tuple><int>2</int></tuple></Grid></Catalogue>", Catalogue )
        assert result.grid == [ [ 1 ] ]

    def testEmptyScalarElement ( self ) :
        """An empty element is an empty string"""
        assert loads( "<Legacy><FirstName/></Legacy>", Legacy ).firstName == ""

    def testOddMap ( self ) :
        """An odd number of map entries gives an empty map"""
        xml = "<Scores><Scores><str>a</str><int>1</int><str>b</str></Scores></Scores>"
        with self.assertLogs( "mirrorxml", "WARNING" ) :
            assert loads( xml, Scores ).scores == {}
        with self.assertRaises( SchemaError ) :
            loads( xml, Scores, strict_maps = True )

    def testMispairedMap ( self ) :
        """Entries out of key/value order are dropped"""
        xml = "<Scores><Scores><int>1</int><str>a</str><str>b</str><int>2</int></Scores></Scores>"
        assert loads( xml, Scores ).scores == { "b" : 2 }
        with self.assertRaises( SchemaError ) :
            loads( xml, Scores, strict_maps = True )

    def testMapOtherElements ( self ) :
        """Map entries ignore elements of other types"""
        xml = "<Scores><Scores><str>a</str><float>0.5</float><int>1</int></Scores></Scores>"
        assert loads( xml, Scores, strict_maps = True ).scores == { "a" : 1 }

@dataclass
class Ratio :
    value : Fraction = field( default_factory = Fraction )

@dataclass
class Shift :
    start : time = time()
    length : timedelta = timedelta()

class Plain ( object ) :
    def __init__ ( self, name = "" ) :
        self.name = name

@dataclass
class Holder :
    item : Optional[Plain] = None

@dataclass
class Marker :
    pass

class Pair ( NamedTuple ) :
    left : int = 0
    right : int = 0

@dataclass
class Clash :
    _x : int = 0
    x : int = 0

if __name__ == "__main__":
    unittest.main()
