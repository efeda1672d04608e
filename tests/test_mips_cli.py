import pytest

from mips_cli import EXIT_ERROR, EXIT_OK, EXIT_STEP_LIMIT, main
from mips_decode import FUNCT, OPCODE, encode_i, encode_r


def write_program(tmp_path, words):
    path = tmp_path / 'prog.bin'
    path.write_text(''.join(f'{word:032b}\n' for word in words))
    return str(path)


def test_runs_to_completion_and_dumps(tmp_path, capsys):
    path = write_program(tmp_path, [
        encode_i(OPCODE['lui'], rt=3, imm=0x1234),
        encode_i(OPCODE['ori'], rt=3, rs=3, imm=0x5678),
        encode_i(OPCODE['sw'], rt=3, rs=0, imm=0x100),
    ])
    assert main([path, '--dump']) == EXIT_OK
    out = capsys.readouterr().out
    assert '$3  = 0x12345678' in out
    assert '[0x00000100] = 0x12345678' in out


def test_fault_exits_nonzero(tmp_path, capsys):
    path = write_program(tmp_path, [encode_r(FUNCT['div'], rs=1, rt=2)])
    assert main([path]) == EXIT_ERROR
    err = capsys.readouterr().err
    assert 'arithmetic_fault' in err
    assert 'pc=0x00000000' in err


def test_illegal_instruction_reports_word(tmp_path, capsys):
    path = write_program(tmp_path, [0, 0xFC000000])
    assert main([path]) == EXIT_ERROR
    err = capsys.readouterr().err
    assert 'illegal_instruction' in err
    assert 'word=0xfc000000' in err


def test_step_limit(tmp_path, capsys):
    path = write_program(tmp_path, [encode_i(OPCODE['beq'], imm=-1)])
    assert main([path, '--max-steps', '10']) == EXIT_STEP_LIMIT
    assert 'limit reached' in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / 'nope.bin')]) == EXIT_ERROR
    assert 'could not read program' in capsys.readouterr().err


def test_malformed_listing(tmp_path, capsys):
    path = tmp_path / 'bad.bin'
    path.write_text('0101\n')
    assert main([str(path)]) == EXIT_ERROR
    assert 'line 1' in capsys.readouterr().err


def test_missing_argument_is_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2
