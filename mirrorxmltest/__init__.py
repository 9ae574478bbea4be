#    mirrorxmltest/__init__.py - shared fixtures and round-trip tests for mirrorxml
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
from collections import OrderedDict, deque
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any, ClassVar, Optional, Union
from uuid import UUID

from mirrorxml import Transient, UnsupportedTypeError

class MirrorTests ( object ) :
    r"""Round-trip tests shared by every way of writing and reading documents.
    Subclasses mix in ``unittest.TestCase`` and set ``self.marshal`` (object to
    document) and ``self.unmarshal`` (document and type to object) in ``setUp``."""

    def _perform ( self, data, kind = None, expected = None ) :
        if expected is None :
            expected = data
        result = self.unmarshal( self.marshal( data ), kind or type( data ) )
        if result != expected :
            print( ">>", expected )
            print( "<<", result )
        assert result == expected
        return result

    def _unsupported ( self, data ) :
        try :
            self.marshal( data )
        except UnsupportedTypeError as ex :
            assert "support" in str( ex )
        else :
            self.fail( "operation supported when it should not be" )

    def testPerson ( self ) :
        """Objects nested in objects and lists, enums, dates and booleans"""
        result = self._perform( sherlock() )
        assert isinstance( result.books, BookList )

    def testTransient ( self ) :
        """Transient fields are reset to their default"""
        data = sherlock()
        data.id = 2018
        result = self._perform( data )
        assert result.id == 1

    def testInheritance ( self ) :
        """Fields of base classes are kept"""
        data = Detective( first_name = "Sherlock", birth_date = BIRTH_DATE, agency = "Consulting" )
        self._perform( data )

    def testPlainClass ( self ) :
        """Annotated classes that are not dataclasses; class variables are not fields"""
        data = Tally()
        data.hits = 12
        data.label = "visits"
        result = self._perform( data )
        assert result.kind == "tally"

    def testCamelCaseFields ( self ) :
        """Field names already in camel case"""
        data = Legacy()
        data.firstName = "Mycroft"
        data.isDetective = False
        self._perform( data )

    def testScalars ( self ) :
        """Every scalar type of the default table"""
        data = Scalars( flag = True, count = -7, ratio = 0.1, signal = complex( 1, -2 ), price = Decimal( "19.90" )
            , name = "a & b <c>", raw = b"\x00\xff\x10", when = datetime( 2009, 3, 14, 15, 9, 26, 535000, tzinfo = timezone.utc )
            , day = date( 2020, 2, 29 ), ident = UUID( "12345678-1234-5678-1234-567812345678" )
            , where = Path( "var/lib/data.xml" ), gender = Gender.FEMALE, level = Level.HIGH )
        self._perform( data )

    def testEmptyString ( self ) :
        """Empty strings survive"""
        data = Book( title = "" )
        self._perform( data )

    def testOptionalAbsent ( self ) :
        """None-valued fields are left out and come back as their default"""
        data = Library( name = "Diogenes Club" )
        result = self._perform( data )
        assert result.location is None

    def testOptionalPresent ( self ) :
        """Optional object fields"""
        data = Library( location = Address( "Pall Mall", "London" ) )
        self._perform( data )

    def testContainers ( self ) :
        """Maps, tuples, sets, frozensets and deques as fields"""
        data = Library( name = "British Library"
            , shelves = { "crime" : Book( "A Study in Scarlet" ), "horror" : Book( "The Hound of the Baskervilles" ) }
            , isbns = ( 3, 1, 4, 1, 5 ), tags = { "old", "dusty" }, sealed = frozenset( [ "vault" ] )
            , queue = deque( [ "returns", "loans" ] ), ratings = OrderedDict( [ ( "z", 1.5 ), ( "a", 2.0 ) ] ) )
        result = self._perform( data )
        assert list( result.ratings ) == [ "z", "a" ]

    def testEmptyContainers ( self ) :
        """Empty containers come back empty"""
        data = Library( shelves = {}, isbns = (), tags = set(), queue = deque() )
        self._perform( data )

    def testNestedContainers ( self ) :
        """Containers of containers, and enum keys"""
        data = Catalogue( grid = [ [ 1, 2 ], [], [ 3 ] ], by_gender = { Gender.MALE : [ Book( "Memoirs" ) ], Gender.NONE : [] }
            , names = { "a" : "x", "b" : "y" } )
        self._perform( data )

    def testNoneItems ( self ) :
        """None items of collections and maps are not written"""
        data = Catalogue( grid = [ [ 1 ] ], by_gender = { Gender.MALE : None }, names = { "a" : "x" } )
        expected = Catalogue( grid = [ [ 1 ] ], by_gender = {}, names = { "a" : "x" } )
        self._perform( data, expected = expected )

    def testRootCollection ( self ) :
        """Containers as the document root"""
        self._perform( [ Book( "Memoirs" ), Book( "Return" ) ], list[Book] )
        self._perform( { "a" : 1 }, dict[str, int] )
        self._perform( ( 1, 2 ), tuple[int, ...] )
        self._perform( BookList( [ Book( "Memoirs" ) ] ) )

    def testRootScalar ( self ) :
        """Scalars as the document root"""
        self._perform( 42 )
        self._perform( "hello" )
        self._perform( Gender.MALE )

    def testUnsupportedNone ( self ) :
        """None cannot be marshalled by itself"""
        self._unsupported( None )

    def testUnsupportedLambda ( self ) :
        """Ensure lambdas raise the correct exception"""
        self._unsupported( lambda x : repr( x ) )

    def testUnsupportedGenerator ( self ) :
        """Ensure generators raise the correct exception"""
        self._unsupported( ( i for i in range( 1, 10 ) ) )

    def testUnsupportedIterator ( self ) :
        """Ensure iterators raise the correct exception"""
        self._unsupported( iter( list( "abcdefg" ) ) )

    def testUnsupportedModule ( self ) :
        """Ensure modules raise the correct exception"""
        import unittest
        self._unsupported( unittest )

    def testUnsupportedClass ( self ) :
        """Ensure classes as values raise the correct exception"""
        self._unsupported( Book )

class Gender ( Enum ) :
    NONE = 0
    MALE = 1
    FEMALE = 2

class Level ( IntEnum ) :
    LOW = 1
    HIGH = 2

@dataclass
class Address :
    street : str = ""
    city : str = ""

@dataclass
class Book :
    title : str = ""

class BookList ( list[Book] ) :
    pass

def _now () :
    return datetime.now( timezone.utc )

@dataclass
class Person :
    id : Transient[int] = field( default = 1, compare = False )
    first_name : str = ""
    last_name : str = ""
    gender : Gender = Gender.NONE
    age : int = 0
    birth_date : datetime = field( default_factory = _now )
    is_detective : bool = False
    address : Address = field( default_factory = Address )
    books : BookList = field( default_factory = BookList )

@dataclass
class Detective ( Person ) :
    agency : str = ""

BIRTH_DATE = datetime( 1854, 1, 6, tzinfo = timezone.utc )

def sherlock () :
    return Person( id = 2018, first_name = "Sherlock", last_name = "Holmes", gender = Gender.MALE, age = 164
        , birth_date = BIRTH_DATE, is_detective = True, address = Address( "221B Baker Street", "London" )
        , books = BookList( [ Book( "The Hound of the Baskervilles" ), Book( "The Sign of Four" ) ] ) )

class Tally ( object ) :
    hits : int
    label : str = "tally"
    kind : ClassVar[str] = "tally"
    def __init__ ( self ) :
        self.hits = 0
    def __eq__ ( self, other ) :
        return isinstance( other, Tally ) and ( self.hits, self.label ) == ( other.hits, other.label )
    def __repr__ ( self ) :
        return "<Tally:%d,%s>" % ( self.hits, self.label )

class Legacy ( object ) :
    firstName : str = ""
    isDetective : bool = True
    def __eq__ ( self, other ) :
        return isinstance( other, Legacy ) and vars( self ) == vars( other )

@dataclass
class Scalars :
    flag : bool = False
    count : int = 0
    ratio : float = 0.0
    signal : complex = 0j
    price : Decimal = Decimal( 0 )
    name : str = ""
    raw : bytes = b""
    when : Optional[datetime] = None
    day : Optional[date] = None
    ident : Optional[UUID] = None
    where : Path = Path( "." )
    gender : Gender = Gender.NONE
    level : Level = Level.LOW

@dataclass
class Library :
    name : str = ""
    location : Optional[Address] = None
    shelves : dict[str, Book] = field( default_factory = dict )
    isbns : tuple[int, ...] = ()
    tags : set[str] = field( default_factory = set )
    sealed : frozenset[str] = frozenset()
    queue : deque[str] = field( default_factory = deque )
    ratings : OrderedDict[str, float] = field( default_factory = OrderedDict )

@dataclass
class Catalogue :
    grid : list[list[int]] = field( default_factory = list )
    by_gender : dict[Gender, list[Book]] = field( default_factory = dict )
    names : dict[str, str] = field( default_factory = dict )

@dataclass
class Range :
    low : int = 0
    high : int = 0
    checked : Transient[bool] = False
    def validate_object ( self ) :
        if self.low > self.high :
            raise ValueError( "low %d is above high %d" % ( self.low, self.high ) )
        self.checked = True

@dataclass
class Point :
    x : int
    y : int

@dataclass
class Scores :
    scores : dict[str, int] = field( default_factory = dict )

@dataclass
class Shelf :
    books : Sequence[Book] = ()
    index : Mapping[str, int] = field( default_factory = dict )

@dataclass
class Loose :
    anything : Any = None
    either : Union[int, str] = 0
    maybe : int | None = None
