from rox.interpreter import Interpreter, run_source


def test_program_1(capsys, examples_dir):
    with open(examples_dir / 'program_1.rox', 'r', encoding='utf-8') as f:
        source = f.read()
    interp = Interpreter()
    run_source(source, interp)
    out = capsys.readouterr().out.strip()
    assert out == 'Hello World!!'
