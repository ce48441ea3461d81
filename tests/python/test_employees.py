from speed_comparison import employees


def test_walk_through_output(session, capsys):
    employees.run(session)

    out = capsys.readouterr().out
    assert "Table 'employees' created." in out
    assert "Inserted 1 row(s) with Statement." in out
    assert "Inserted 2 row(s) with Batch." in out
    assert "Inserted 1 row(s) with PreparedStatement." in out
    assert "ID: 1 | Name: Alice | Position: Manager | Salary: 75000.00" in out
    assert "ID: 4 | Name: David | Position: Designer | Salary: 50000.00" in out


def test_query_data_returns_all_rows(session):
    employees.create_table(session)
    employees.insert_with_statement(session)
    employees.insert_with_batch(session)

    rows = employees.query_data(session)

    assert [name for _, name, _, _ in rows] == ["Alice", "Bob", "Charlie"]


def test_main_with_file_database(tmp_path, capsys):
    url = f"sqlite:///{tmp_path}/sample.db"

    assert employees.main(["--url", url]) == 0
    assert employees.main(["--url", url]) == 0

    out = capsys.readouterr().out
    assert "ID: 8 | Name: David" in out


def test_main_reports_failure(tmp_path):
    assert employees.main(["--url", f"sqlite:///{tmp_path}/missing/sample.db"]) == 1
