#    mirrorxml/__init__.py - type-directed mapping of object graphs to XML.
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
r"""MIRRORXML maps Python object graphs to XML documents whose structure mirrors the
objects' declared fields, and maps such documents back to objects of a requested
type.  No per-type marshalling code is needed: the type annotations of a class
say everything there is to know.

    >>> from dataclasses import dataclass
    >>> from mirrorxml.XML import dumps
    >>> @dataclass
    ... class Book :
    ...     title : str = ""
    >>> dumps( Book( "The Sign of Four" ) )
    b'<?xml version="1.0" encoding="UTF-8" standalone="no"?>\r\n<Book>\r\n  <Title>The Sign of Four</Title>\r\n</Book>\r\n'

Every type falls into one of five shapes (see :class:`Shape`):

 - scalars (numbers, booleans, strings, dates, paths, enumerations and anything
   else in the :mod:`mirrorxml.scalars` table) become the text of an element;
 - objects become an element per declared field, named after the field in
   UpperCamelCase (``first_name`` and ``firstName`` both give ``<FirstName>``),
   in declaration order;
 - sequences (tuples) and collections (lists, sets, deques, ...) become one
   element per item, named after the item's class;
 - maps become alternating key and value elements, each named after its class.

The root element is named after the class of the marshalled object and is
checked against the requested type when loading.

Decoding is driven entirely by declared types.  Container items are looked up
by the name of the *declared* item type (``list[Book]`` looks for ``<Book>``),
while encoding names them by the *runtime* class of each item.  Subclass
instances in a container are therefore written but not read back; this is
intentional.

Objects are rebuilt by calling their class with no arguments and setting each
field found in the document.  Fields missing from the document keep their
default, so documents written by an older version of a class still load.  Fields
annotated :data:`Transient` are neither written nor read.  If a rebuilt object
has a ``validate_object()`` method it is called once all fields are set.

The following are not supported:

 - cyclic object graphs (marshalling recurses until the stack runs out);
 - functions, methods, generators, iterators, modules and classes as values;
 - fields annotated with ``Any``, type variables or non-optional unions;
 - heterogeneous tuples and named tuples;
 - classes that declare no annotated fields (unless registered as scalars);
 - two fields whose names give the same element (``_x`` and ``x``);
 - text holding characters XML 1.0 cannot carry;
 - XML namespaces, and attributes as a data channel.

The public interface lives in :mod:`mirrorxml.XML` and follows :mod:`pickle`
(``dump``, ``dumps``, ``load``, ``loads``).
"""
from collections import deque
from collections.abc import Collection, Iterator, Mapping, MutableSequence, MutableSet
from enum import Enum
import functools, inspect, logging, types, typing
from typing import Annotated, Any, ClassVar, Union, get_args, get_origin, get_type_hints
import dataclasses

from mirrorxml import document
from mirrorxml.errors import MirrorXMLError, ParseError, SchemaError, ConversionError, InstantiationError, UnsupportedTypeError
from mirrorxml.scalars import ScalarRegistry, default_registry, register_scalar

__version__ = "0.1"
__all__ = [ 'Shape', 'Transient', 'TRANSIENT', 'FieldDescriptor', 'MirrorEncoder', 'MirrorDecoder'
    , 'classify', 'fields_of', 'simple_name', 'tag_for', 'element_types', 'register_scalar', 'ScalarRegistry'
    , 'MirrorXMLError', 'ParseError', 'SchemaError', 'ConversionError', 'InstantiationError', 'UnsupportedTypeError' ]

logger = logging.getLogger( __name__ )

class Shape ( Enum ) :
    r"""How values of a type are laid out in XML."""
    SCALAR = "scalar"
    OBJECT = "object"
    SEQUENCE = "sequence"
    COLLECTION = "collection"
    MAP = "map"

class _TransientMarker ( object ) :
    __slots__ = ()
    def __repr__ ( self ) :
        return "TRANSIENT"

TRANSIENT = _TransientMarker()

class Transient ( object ) :
    r"""Marks a field as non-persistent: ``id : Transient[int] = 0``.

    ``Transient[T]`` is ``Annotated[T, TRANSIENT]``; such fields are skipped when
    writing and keep their default when reading."""
    def __class_getitem__ ( cls, kind ) :
        return Annotated[ kind, TRANSIENT ]

class FieldDescriptor ( object ) :
    __slots__ = ( 'name', 'kind', 'tag', 'transient' )
    def __init__ ( self, name, kind, tag, transient = False ) :
        self.name = name
        self.kind = kind
        self.tag = tag
        self.transient = transient
    def __repr__ ( self ) :
        return "<FieldDescriptor:" + ",".join( slot + "=" + repr( getattr( self, slot ) ) for slot in self.__slots__ ) + ">"

def tag_for ( name ) :
    r"""Element name for the field ``name``: ``first_name`` and ``firstName`` both
    give ``FirstName``."""
    tag = "".join( part[:1].upper() + part[1:] for part in name.split( '_' ) )
    return tag or name

unsupported = ( types.FunctionType, types.BuiltinFunctionType, types.MethodType, types.GeneratorType
    , types.CoroutineType, types.ModuleType, type, type( None ), Iterator )

def resolve ( kind ) :
    r"""Strip ``Annotated`` and ``Optional`` wrappers from a declared type."""
    origin = get_origin( kind )
    if origin is Annotated :
        return resolve( get_args( kind )[0] )
    if origin is Union or origin is types.UnionType :
        args = [ arg for arg in get_args( kind ) if arg is not type( None ) ]
        if len( args ) == 1 :
            return resolve( args[0] )
        raise UnsupportedTypeError( "union types are not supported: %r" % ( kind, ) )
    return kind

def origin_of ( kind ) :
    r"""The class behind a declared type (``list`` for ``list[int]``)."""
    kind = resolve( kind )
    origin = get_origin( kind ) or kind
    if origin is Any or not inspect.isclass( origin ) :
        raise UnsupportedTypeError( "%r is not a supported type." % ( kind, ) )
    return origin

def simple_name ( kind ) :
    r"""The unqualified class name used as the tag for ``kind``."""
    return origin_of( kind ).__name__

def classify ( kind, scalars = default_registry ) :
    r"""Return the :class:`Shape` of the declared type or class ``kind``."""
    origin = origin_of( kind )
    if origin in scalars :
        return Shape.SCALAR
    if issubclass( origin, unsupported ) :
        raise UnsupportedTypeError( "'%s' is an unsupported type." % origin.__name__ )
    if issubclass( origin, tuple ) :
        if hasattr( origin, '_fields' ) :
            raise UnsupportedTypeError( "named tuple '%s' is not supported." % origin.__name__ )
        return Shape.SEQUENCE
    if issubclass( origin, Mapping ) :
        return Shape.MAP
    if issubclass( origin, Collection ) :
        return Shape.COLLECTION
    # nothing to write for it, and nothing to read back.
    if not fields_of( origin ) and not dataclasses.is_dataclass( origin ) :
        raise UnsupportedTypeError( "'%s' declares no fields and is not a supported scalar type." % origin.__name__ )
    return Shape.OBJECT

@functools.lru_cache( maxsize = None )
def fields_of ( cls ) :
    r"""Return the :class:`FieldDescriptor` of every declared field of ``cls``, base
    class fields first, each class in declaration order."""
    try :
        hints = get_type_hints( cls, include_extras = True )
    except ( NameError, TypeError ) as ex :
        raise UnsupportedTypeError( "cannot resolve the field types of '%s': %s" % ( cls.__name__, ex ) ) from ex
    out = []
    for name, hint in hints.items() :
        if get_origin( hint ) is ClassVar or isinstance( hint, dataclasses.InitVar ) :
            continue
        transient = get_origin( hint ) is Annotated and any( meta is TRANSIENT for meta in hint.__metadata__ )
        tag = tag_for( name )
        for other in out :
            if other.tag == tag :
                raise UnsupportedTypeError( "fields '%s' and '%s' of '%s' both map to <%s>; this is not supported."
                    % ( other.name, name, cls.__name__, tag ) )
        out.append( FieldDescriptor( name, hint, tag, transient ) )
    return tuple( out )

def element_types ( kind, count ) :
    r"""The ``count`` declared item types of the container type ``kind``: from its
    parameters (``dict[str, int]``) or from a parameterized base of a subclass
    (``class BookList ( list[Book] )``)."""
    kind = resolve( kind )
    args = [ arg for arg in get_args( kind ) if arg is not Ellipsis ]
    if not args :
        for base in inspect.getmro( origin_of( kind ) ) :
            for generic in base.__dict__.get( '__orig_bases__', () ) :
                args = [ arg for arg in get_args( generic ) if arg is not Ellipsis ]
                if args :
                    break
            if args :
                break
    if count == 1 and len( args ) > 1 and all( arg == args[0] for arg in args ) :
        args = args[:1]
    if len( args ) != count :
        raise UnsupportedTypeError( "cannot determine the item type%s of %r." % ( "s" if count > 1 else "", kind ) )
    for arg in args :
        if isinstance( arg, typing.TypeVar ) :
            raise UnsupportedTypeError( "unbound item type %r in %r." % ( arg, kind ) )
    return args

def instantiate ( cls ) :
    if inspect.isabstract( cls ) :
        raise InstantiationError( "'%s' is abstract and cannot be instantiated." % cls.__name__ )
    try :
        return cls()
    except TypeError as ex :
        raise InstantiationError( "'%s' cannot be constructed without arguments: %s" % ( cls.__name__, ex ) ) from ex

class MirrorEncoder ( object ) :
    r"""Builds the XML tree for an object.  ``scalars`` replaces the default
    :class:`~mirrorxml.scalars.ScalarRegistry`."""
    def __init__ ( self, scalars = None ) :
        self.scalars = scalars or default_registry

    def marshal ( self, obj ) :
        r"""Return a new ``ElementTree`` representing ``obj``."""
        if obj is None :
            raise UnsupportedTypeError( "None is not supported as the root of a document." )
        tree = document.new_tree( type( obj ).__name__ )
        logger.debug( "marshalling %s", type( obj ).__name__ )
        self._marshal( obj, tree.getroot() )
        return tree

    def _marshal ( self, obj, parent ) :
        if obj is None :
            return
        shape = classify( type( obj ), self.scalars )
        getattr( self, "marshal_" + shape.value )( obj, parent )

    def _child ( self, obj, parent ) :
        self._marshal( obj, document.append( parent, type( obj ).__name__ ) )

    def marshal_object ( self, obj, parent ) :
        for field in fields_of( type( obj ) ) :
            if field.transient :
                continue
            value = getattr( obj, field.name, None )
            if value is not None :
                self._marshal( value, document.append( parent, field.tag ) )

    def marshal_collection ( self, obj, parent ) :
        for item in obj :
            if item is not None :
                self._child( item, parent )

    marshal_sequence = marshal_collection

    def marshal_map ( self, obj, parent ) :
        for key in obj :
            value = obj[ key ]
            if key is None or value is None :
                logger.debug( "skipping map entry %r -> %r", key, value )
                continue
            self._child( key, parent )
            self._child( value, parent )

    def marshal_scalar ( self, obj, parent ) :
        parent.text = self.scalars.encode( obj )

class MirrorDecoder ( object ) :
    r"""Rebuilds objects from an XML tree.

    ``scalars`` replaces the default :class:`~mirrorxml.scalars.ScalarRegistry`.
    With ``strict_maps`` a map whose key and value elements do not pair up
    raises :class:`SchemaError`; otherwise the odd entries are dropped (and an
    odd number of entries leaves the map empty)."""

    # insertion methods for mutable collections, found along the MRO.
    builders = { list : list.append, set : set.add, deque : deque.append
        , MutableSequence : MutableSequence.append, MutableSet : MutableSet.add }
    immutables = ( tuple, frozenset )

    def __init__ ( self, scalars = None, strict_maps = False ) :
        self.scalars = scalars or default_registry
        self.strict_maps = strict_maps

    def unmarshal ( self, tree, kind ) :
        r"""Return an instance of ``kind`` built from ``tree`` (an ``ElementTree`` or
        root ``Element``) whose root element must be named after ``kind``."""
        root = tree.getroot() if hasattr( tree, 'getroot' ) else tree
        expected = simple_name( kind )
        if root.tag != expected :
            raise SchemaError( "wrong root node: expected <%s>, found <%s>." % ( expected, root.tag ) )
        logger.debug( "unmarshalling %s", expected )
        return self._unmarshal( kind, root )

    def _unmarshal ( self, kind, node ) :
        shape = classify( kind, self.scalars )
        return getattr( self, "unmarshal_" + shape.value )( kind, node )

    def unmarshal_object ( self, kind, node ) :
        cls = origin_of( kind )
        obj = instantiate( cls )
        for field in fields_of( cls ) :
            if field.transient :
                continue
            children = document.query( node, field.tag )
            if len( children ) == 1 :
                setattr( obj, field.name, self._unmarshal( field.kind, children[0] ) )
            elif children :
                logger.debug( "%d <%s> elements for %s.%s, keeping the default", len( children ), field.tag, cls.__name__, field.name )
        validate = getattr( obj, 'validate_object', None )
        if callable( validate ) :
            validate()
        return obj

    def _items ( self, kind, node ) :
        item_kind, = element_types( kind, 1 )
        return [ self._unmarshal( item_kind, child ) for child in document.query( node, simple_name( item_kind ) ) ]

    def unmarshal_sequence ( self, kind, node ) :
        return origin_of( kind )( self._items( kind, node ) )

    def unmarshal_collection ( self, kind, node ) :
        cls = origin_of( kind )
        if issubclass( cls, self.immutables ) :
            return cls( self._items( kind, node ) )
        out = instantiate( cls )
        insert = self.builder( cls )
        for item in self._items( kind, node ) :
            insert( out, item )
        return out

    def builder ( self, cls ) :
        for base in inspect.getmro( cls ) :
            if base in self.builders :
                return self.builders[ base ]
        for name in ( 'add', 'append' ) :
            method = getattr( cls, name, None )
            if callable( method ) :
                return method
        raise UnsupportedTypeError( "'%s' has no method to add items with." % cls.__name__ )

    def unmarshal_map ( self, kind, node ) :
        cls = origin_of( kind )
        key_kind, value_kind = element_types( kind, 2 )
        key_tag, value_tag = simple_name( key_kind ), simple_name( value_kind )
        out = instantiate( cls )
        children = document.query( node, key_tag, value_tag )
        if len( children ) % 2 :
            self._degraded( "odd number (%d) of <%s>/<%s> entries in <%s>" % ( len( children ), key_tag, value_tag, node.tag ) )
            return out
        for key_node, value_node in zip( children[0::2], children[1::2] ) :
            if key_node.tag != key_tag or value_node.tag != value_tag :
                self._degraded( "<%s><%s> is not a <%s><%s> pair in <%s>" % ( key_node.tag, value_node.tag, key_tag, value_tag, node.tag ) )
                continue
            out[ self._unmarshal( key_kind, key_node ) ] = self._unmarshal( value_kind, value_node )
        return out

    def _degraded ( self, message ) :
        if self.strict_maps :
            raise SchemaError( message + "." )
        logger.warning( message + ", entries dropped" )

    def unmarshal_scalar ( self, kind, node ) :
        return self.scalars.decode( origin_of( kind ), node.text or "" )
