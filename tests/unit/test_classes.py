"""Classes, instances, bound methods and inheritance."""

from treelox.errors import ErrorKind


def lines(run_lox, source):
    out, result = run_lox(source)
    assert result.ok, result.errors
    return out.splitlines()


def test_fields_and_methods(run_lox):
    source = """
    class Point {
        init(x, y) { this.x = x; this.y = y; }
        sum() { return this.x + this.y; }
    }
    var p = Point(2, 3);
    print p.sum();
    p.x = 10;
    print p.sum();
    """
    assert lines(run_lox, source) == ["5", "13"]


def test_fields_shadow_methods(run_lox):
    source = """
    class C { m() { return "method"; } }
    var c = C();
    print c.m();
    c.m = "field";
    print c.m;
    """
    assert lines(run_lox, source) == ["method", "field"]


def test_bound_method_remembers_receiver(run_lox):
    source = """
    class Greeter {
        init(name) { this.name = name; }
        greet() { return "hi " + this.name; }
    }
    var g = Greeter("ada").greet;
    print g();
    """
    assert lines(run_lox, source) == ["hi ada"]


def test_same_method_off_same_instance_is_equal(run_lox):
    source = """
    class C { m() {} }
    var a = C();
    var b = C();
    print a.m == a.m;
    print a.m == b.m;
    """
    assert lines(run_lox, source) == ["true", "false"]


def test_class_arity_comes_from_init(run_lox):
    _, result = run_lox("class C { init(a, b) {} }\nC(1);")
    assert result.runtime_error.kind is ErrorKind.ARITY_MISMATCH
    assert result.runtime_error.message == "Expected 2 arguments but got 1."

    _, result = run_lox("class D {}\nD(1);")
    assert result.runtime_error.kind is ErrorKind.ARITY_MISMATCH


def test_constructor_always_returns_the_instance(run_lox):
    source = """
    class C {
        init() { this.tag = "built"; return 42; }
    }
    var c = C();
    print c;
    print c.tag;
    """
    assert lines(run_lox, source) == ["C instance", "built"]


def test_calling_init_directly_returns_its_value(run_lox):
    source = """
    class C {
        init() { this.count = 0; return "from init"; }
    }
    var c = C();
    print c.init();
    """
    assert lines(run_lox, source) == ["from init"]


def test_inherited_methods(run_lox):
    source = """
    class A { hello() { return "A.hello"; } }
    class B < A {}
    print B().hello();
    """
    assert lines(run_lox, source) == ["A.hello"]


def test_inherited_init(run_lox):
    source = """
    class A { init(v) { this.v = v; } }
    class B < A {}
    print B(7).v;
    """
    assert lines(run_lox, source) == ["7"]


def test_super_dispatches_to_immediate_superclass(run_lox):
    source = """
    class A { name() { return "A"; } }
    class B < A { name() { return "B>" + super.name(); } }
    class C < B { name() { return "C>" + super.name(); } }
    print C().name();
    """
    assert lines(run_lox, source) == ["C>B>A"]


def test_super_keeps_original_receiver(run_lox):
    source = """
    class A {
        describe() { return this.label(); }
        label() { return "A"; }
    }
    class B < A {
        describe() { return "B sees " + super.describe(); }
        label() { return "B"; }
    }
    print B().describe();
    """
    assert lines(run_lox, source) == ["B sees B"]


def test_super_in_inherited_method_binds_lexically(run_lox):
    source = """
    class A { method() { return "A"; } }
    class B < A {
        method() { return "B"; }
        test() { return super.method(); }
    }
    class C < B {}
    print C().test();
    """
    assert lines(run_lox, source) == ["A"]


def test_super_init_chain(run_lox):
    source = """
    class Base { init(a) { this.a = a; } }
    class Derived < Base {
        init(a, b) { super.init(a); this.b = b; }
    }
    var d = Derived(1, 2);
    print d.a + d.b;
    """
    assert lines(run_lox, source) == ["3"]


def test_classes_are_first_class(run_lox):
    source = """
    class A { who() { return "A"; } }
    fun make(klass) { return klass(); }
    var k = A;
    print make(k).who();
    """
    assert lines(run_lox, source) == ["A"]


def test_undefined_property(run_lox):
    _, result = run_lox("class C {}\nprint C().missing;")
    error = result.runtime_error
    assert error.kind is ErrorKind.UNDEFINED_PROPERTY
    assert error.message == "Undefined property 'missing'."
    assert error.line == 2


def test_undefined_super_method(run_lox):
    source = """
    class A {}
    class B < A { m() { return super.nope(); } }
    B().m();
    """
    _, result = run_lox(source)
    assert result.runtime_error.kind is ErrorKind.UNDEFINED_PROPERTY


def test_property_on_non_instance(run_lox):
    _, result = run_lox('print "str".length;')
    assert result.runtime_error.kind is ErrorKind.TYPE_MISMATCH
    assert result.runtime_error.message == "Only instances have properties."

    _, result = run_lox("var n = 1; n.x = 2;")
    assert result.runtime_error.kind is ErrorKind.TYPE_MISMATCH
    assert result.runtime_error.message == "Only instances have fields."


def test_invalid_superclass(run_lox):
    _, result = run_lox('var NotAClass = "nope";\nclass B < NotAClass {}')
    error = result.runtime_error
    assert error.kind is ErrorKind.INVALID_SUPERCLASS
    assert error.message == "Superclass must be a class."
    assert error.line == 2
