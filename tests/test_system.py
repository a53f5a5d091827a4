import io

from ipmcube.system import Machine, Node, Process, Thread


def _hierarchy():
    mach = Machine("m")
    node = Node("n0", mach)
    proc = Process("Task 0", 0, node)
    thread = Thread("Thread", 0, proc)
    return mach, node, proc, thread


def test_children_register_with_parents():
    mach, node, proc, thread = _hierarchy()
    assert mach.children == [node]
    assert node.children == [proc]
    assert proc.children == [thread]


def test_levels_increase_down_the_hierarchy():
    mach, node, proc, thread = _hierarchy()
    assert mach.level() == 0
    assert node.level() == mach.level() + 1
    assert proc.level() == node.level() + 1
    assert thread.level() == proc.level() + 1


def test_orphans_are_at_level_zero():
    assert Node("n").level() == 0
    assert Process("p").level() == 0
    assert Thread("t").level() == 0


def test_machine_xml_full_tree():
    mach, _, _, _ = _hierarchy()
    buf = io.StringIO()
    mach.write_xml(buf)
    expected = (
        '    <machine Id="0">\n'
        "      <name>m</name>\n"
        '      <node Id="0">\n'
        "        <name>n0</name>\n"
        '        <process Id="0">\n'
        "          <name>Task 0</name>\n"
        "          <rank>0</rank>\n"
        '          <thread Id="0">\n'
        "            <name>Thread</name>\n"
        "            <rank>0</rank>\n"
        "          </thread>\n"
        "        </process>\n"
        "      </node>\n"
        "    </machine>\n"
    )
    assert buf.getvalue() == expected


def test_machine_description_written_only_when_set():
    buf = io.StringIO()
    Machine("m", "big box").write_xml(buf)
    assert "<descr>big box</descr>" in buf.getvalue()
    buf = io.StringIO()
    Machine("m").write_xml(buf)
    assert "<descr>" not in buf.getvalue()


def test_ids_are_written():
    mach = Machine("m", id=3)
    node = Node("n", mach, id=5)
    buf = io.StringIO()
    node.write_xml(buf)
    assert '<node Id="5">' in buf.getvalue()
    buf = io.StringIO()
    mach.write_xml(buf)
    assert '<machine Id="3">' in buf.getvalue()


def test_machine_and_node_match_by_name():
    assert Machine("a", "x").matches(Machine("a", "y"))
    assert not Machine("a").matches(Machine("b"))
    assert Node("n").matches(Node("n"))
    assert not Node("n").matches(Node("m"))


def test_process_matches_by_rank():
    assert Process("a", 4).matches(Process("b", 4))
    assert not Process("a", 4).matches(Process("a", 5))


def test_thread_matches_by_rank_and_process_rank():
    p1 = Process("p", 1)
    p2 = Process("q", 1)
    p3 = Process("r", 2)
    assert Thread("t", 0, p1).matches(Thread("u", 0, p2))
    assert not Thread("t", 0, p1).matches(Thread("t", 0, p3))
    assert not Thread("t", 0, p1).matches(Thread("t", 1, p2))