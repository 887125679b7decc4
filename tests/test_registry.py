from propbind import InjectionMap, InjectionRecord, Metadata, Registry


def test_register_creates_empty_metadata():
    registry = Registry()

    class A: ...

    assert registry.is_registered(A) is False
    registry.register(A)
    assert registry.is_registered(A) is True
    assert registry.get_metadata(A) == Metadata()


def test_register_is_idempotent():
    registry = Registry()

    class A: ...

    registry.register(A)
    meta = registry.get_metadata(A)
    meta.instance = A()
    registry.register(A)

    assert len(registry) == 1
    assert registry.get_metadata(A) is meta
    assert isinstance(meta.instance, A)


def test_clear_instances_keeps_types():
    registry = Registry()

    class A: ...

    class B: ...

    registry.register(A)
    registry.register(B)
    registry.get_metadata(A).instance = A()

    registry.clear_instances()

    assert registry.is_registered(A)
    assert registry.is_registered(B)
    assert registry.get_metadata(A).instance is None
    assert registry.get_metadata(B).instance is None


def test_injection_map_preserves_declaration_order():
    injections = InjectionMap()

    class Consumer: ...

    class Foo: ...

    class Bar: ...

    injections.add_injection(Consumer, "foo", Foo)
    injections.add_injection(Consumer, "bar", Bar)

    assert injections.get_direct_injections(Consumer) == (
        InjectionRecord("foo", Foo),
        InjectionRecord("bar", Bar),
    )


def test_injection_map_does_not_inherit():
    injections = InjectionMap()

    class Base: ...

    class Child(Base): ...

    class Dep: ...

    injections.add_injection(Base, "dep", Dep)

    assert injections.get_direct_injections(Child) == ()
    assert len(injections.get_direct_injections(Base)) == 1


def test_injection_record_target_evaluates_forward_reference():
    class Dep: ...

    assert InjectionRecord("dep", Dep).target() is Dep
    assert InjectionRecord("dep", lambda: Dep).target() is Dep
    assert InjectionRecord("dep", None).target() is None
