import pytest

from ipmcube.cube import Cube, CubeError


@pytest.fixture
def cube():
    return Cube()


def _simple(cube):
    met = cube.def_met("Total Time", "", "", "sec", "", "", "", None)
    reg = cube.def_region("Application", 0, 0, "", "", "")
    cnode = cube.def_cnode_cs(reg, "", 0, None)
    mach = cube.def_mach("m", "")
    node = cube.def_node("n", mach)
    proc = cube.def_proc("Task 0", 0, node)
    thrd = cube.def_thrd("Thread", 0, proc)
    return met, reg, cnode, thrd


def test_root_and_child_metrics(cube):
    root = cube.def_met("Total Time", "", "", "sec", "", "", "", None)
    child = cube.def_met("MPI", "", "", "sec", "", "", "", root)
    assert cube.root_metrics == [root]
    assert cube.metrics == [root, child]
    assert root.children == [child]


def test_assign_ids_depth_first(cube):
    m1 = cube.def_met("a", "", "", "sec", "", "", "", None)
    m2 = cube.def_met("b", "", "", "sec", "", "", "", None)
    c1 = cube.def_met("c", "", "", "sec", "", "", "", m1)
    cube.assign_ids()
    ordered = [m1, c1, m2]
    assert [m.id for m in ordered] == list(range(len(ordered)))


def test_region_ids_follow_definition_order(cube):
    regions = [cube.def_region(name, 0, 0, "", "", "") for name in "xyz"]
    cube.assign_ids()
    assert [r.id for r in regions] == list(range(len(regions)))


def test_system_ids_and_links(cube):
    m0 = cube.def_mach("m0", "")
    m1 = cube.def_mach("m1", "")
    node = cube.def_node("n", m1)
    proc = cube.def_proc("p", 3, node)
    thrd = cube.def_thrd("t", 0, proc)
    assert (m0.id, m1.id) == (0, 1)
    assert m1.children == [node]
    assert node.children == [proc]
    assert proc.children == [thrd]
    assert cube.threads == [thrd]


def test_cnode_child_registered_with_caller_region(cube):
    top = cube.def_region("top", 0, 0, "", "", "")
    inner = cube.def_region("inner", 0, 0, "", "", "")
    root = cube.def_cnode(top, None)
    child = cube.def_cnode(inner, root)
    cube.def_cnode(inner, root)
    assert cube.root_cnodes == [root]
    assert top.cnodes == [child]
    assert len(root.children) == 2


def test_get_sev_absent_is_zero(cube):
    met, _, cnode, thrd = _simple(cube)
    assert cube.get_sev(met, cnode, thrd) == 0.0


def test_set_sev_stores_and_accumulates(cube):
    met, _, cnode, thrd = _simple(cube)
    cube.set_sev(met, cnode, thrd, 1.5)
    assert cube.get_sev(met, cnode, thrd) == 1.5
    cube.set_sev(met, cnode, thrd, 2.5)
    assert cube.get_sev(met, cnode, thrd) == pytest.approx(1.5 + 2.5)


def test_add_sev_goes_through_set_sev(cube):
    met, _, cnode, thrd = _simple(cube)
    cube.set_sev(met, cnode, thrd, 2.0)
    cube.add_sev(met, cnode, thrd, 1.0)
    assert cube.get_sev(met, cnode, thrd) == pytest.approx(2.0 + 2.0 + 1.0)


def test_flat_profile_creates_cnodes(cube):
    met = cube.def_met("Time", "", "", "sec", "", "", "", None)
    r1 = cube.def_region("f", 0, 0, "", "", "")
    cube.def_region("g", 0, 0, "", "", "")
    thrd = cube.def_thrd("t", 0, None)
    cube.set_sev_reg(met, r1, thrd, 3.0)
    assert len(cube.cnodes) == len(cube.regions)
    assert cube.cnodes[0].callee is r1
    assert cube.get_sev(met, cube.cnodes[0], thrd) == 3.0
    assert cube.severities_ready


def test_set_sev_reg_unknown_region_raises(cube):
    met, _, _, thrd = _simple(cube)
    stranger = cube.def_region("elsewhere", 0, 0, "", "", "mod")
    with pytest.raises(CubeError):
        cube.set_sev_reg(met, stranger, thrd, 1.0)


def test_add_sev_reg_unknown_region_raises(cube):
    met, _, _, thrd = _simple(cube)
    stranger = cube.def_region("elsewhere", 0, 0, "", "", "mod")
    with pytest.raises(CubeError):
        cube.add_sev_reg(met, stranger, thrd, 1.0)


def test_def_cart_rejects_four_dimensions(cube):
    cart = cube.def_cart(4, [1, 1, 1, 1], [0, 0, 0, 0])
    assert cart is None
    assert cube.carts == []


def test_def_coords_places_thread(cube):
    _, _, _, thrd = _simple(cube)
    cart = cube.def_cart(2, [2, 2], [0, 0])
    cube.def_coords(cart, thrd, [1, 1])
    assert cube.carts == [cart]
    assert cart.ndims == 2


def test_attrs_and_mirrors(cube):
    cube.def_attr("description", "Converted from an IPM profile")
    cube.def_mirror("http://mirror.example.com/")
    assert cube.attrs == [("description", "Converted from an IPM profile")]
    assert cube.mirrors == ["http://mirror.example.com/"]