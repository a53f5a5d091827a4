import io

from ipmcube.program import Cnode, Region, escape_region_name


def test_escape_replaces_special_characters():
    assert escape_region_name("a<b>c&d") == "alt;bgt;camp;d"


def test_escape_leaves_plain_names():
    assert escape_region_name("ipm_main") == "ipm_main"


def test_line_numbers_unknown_when_not_positive():
    r = Region("r", begln=0, endln=-3)
    assert r.begin_line() == -1
    assert r.end_line() == -1
    r2 = Region("r", begln=10, endln=20)
    assert (r2.begin_line(), r2.end_line()) == (10, 20)


def test_region_write_xml():
    r = Region("Application", id=3)
    out = io.StringIO()
    r.write_xml(out)
    assert out.getvalue() == (
        '    <region id="3" mod="" begin="-1" end="-1">\n'
        "      <name>Application</name>\n"
        "      <url></url>\n"
        "      <descr></descr>\n"
        "    </region>\n"
    )


def test_region_write_xml_escapes_name():
    r = Region("x<y")
    out = io.StringIO()
    r.write_xml(out)
    assert f"<name>{escape_region_name('x<y')}</name>" in out.getvalue()


def test_region_matches_name_and_mod():
    assert Region("a", mod="m").matches(Region("a", mod="m", begln=5))
    assert not Region("a", mod="m").matches(Region("a", mod="n"))
    assert not Region("a").matches(Region("b"))


def test_add_cnode_skips_duplicates():
    caller = Region("caller")
    callee = Region("callee")
    first = Cnode(callee)
    second = Cnode(callee)
    caller.add_cnode(first)
    caller.add_cnode(second)
    assert caller.cnodes == [first]
    other = Cnode(callee, line=7)
    caller.add_cnode(other)
    assert caller.cnodes == [first, other]


def test_cnode_tree_links_and_caller():
    app = Region("Application")
    sub = Region("sub")
    root = Cnode(app)
    child = Cnode(sub, parent=root)
    assert root.children == [child]
    assert child.caller() is app
    assert root.caller() is None
    assert (root.level(), child.level()) == (0, 1)


def test_cnode_assign_ids_preorder():
    app = Region("a")
    root = Cnode(app)
    c1 = Cnode(app, parent=root)
    c11 = Cnode(app, parent=c1)
    c2 = Cnode(app, parent=root)
    nxt = root.assign_ids(0)
    assert [n.id for n in (root, c1, c11, c2)] == [0, 1, 2, 3]
    assert nxt == 4


def test_cnode_write_xml_nested():
    app = Region("Application", id=0)
    sub = Region("sub", id=1)
    root = Cnode(app)
    Cnode(sub, parent=root)
    root.assign_ids(0)
    out = io.StringIO()
    root.write_xml(out)
    assert out.getvalue() == (
        '    <cnode id="0" calleeId="0">\n'
        '      <cnode id="1" calleeId="1">\n'
        "      </cnode>\n"
        "    </cnode>\n"
    )


def test_cnode_write_xml_line_and_mod():
    r = Region("f", id=2)
    node = Cnode(r, mod="file.c", line=12)
    out = io.StringIO()
    node.write_xml(out)
    assert out.getvalue().startswith(
        '    <cnode id="0" line="12" mod="file.c" calleeId="2">\n'
    )


def test_cnode_matches():
    r = Region("f", mod="m")
    assert Cnode(r, line=0).matches(Cnode(Region("f", mod="m"), line=-1))
    assert not Cnode(r, mod="a").matches(Cnode(r, mod="b"))
    assert not Cnode(r, line=3).matches(Cnode(r, line=4))