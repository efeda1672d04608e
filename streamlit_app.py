# streamlit_app.py
import streamlit as st

from mips_core import MipsCore, DEFAULT_RUN_LIMIT
from mips_decode import decode, format_decoded
from mips_errors import LoaderError
from mips_loader import load_lines
from mips_word import to_signed64

st.set_page_config(page_title='MIPS Simulator', layout='wide')
st.title('MIPS Instruction-Set Simulator')

# Sidebar - input
st.sidebar.header('Program Input')
upload = st.sidebar.file_uploader('Upload a binary listing (32 binary digits per line)', type=['txt', 'bin'])
text_area = st.sidebar.text_area('Or paste instructions here (one per line)')

if 'sim' not in st.session_state:
    st.session_state.sim = None
    st.session_state.decoded = []
    st.session_state.trace = []

col1, col2 = st.columns([2, 3])
with col1:
    st.subheader('Load / Decode')
    if upload is not None:
        source_lines = upload.getvalue().decode('ascii', errors='replace').splitlines()
    else:
        source_lines = text_area.splitlines()

    if st.button('Decode Instructions'):
        try:
            words = load_lines(source_lines)
        except LoaderError as e:
            st.error(f'Could not load program: {e}')
        else:
            st.session_state.decoded = [
                {'pc': 4 * i, 'word': word, 'decoded': decode(word)} for i, word in enumerate(words)
            ]
            st.session_state.sim = MipsCore(words)
            st.session_state.trace = []
            st.success(f'Decoded {len(words)} instructions and initialized simulator.')

    st.markdown('**Decoded Instructions**')
    if st.session_state.decoded:
        st.table([
            {
                'PC': f"0x{item['pc']:08x}",
                'Instr (hex)': f"0x{item['word']:08x}",
                'Decoded': format_decoded(item['decoded']),
            }
            for item in st.session_state.decoded
        ])
    else:
        st.info('No instructions decoded. Paste instructions or upload a file and click Decode.')

with col2:
    st.subheader('Execution Controls')
    if st.session_state.sim is None:
        st.info('Simulator not initialized. Decode instructions first.')
    else:
        sim: MipsCore = st.session_state.sim
        cols = st.columns([1, 1, 1, 1, 1])
        if cols[0].button('Step'):
            st.session_state.trace.append(sim.trace_step())
        if cols[1].button('Run 10'):
            st.session_state.trace.extend(sim.run_n(10))
        if cols[2].button('Run 100'):
            st.session_state.trace.extend(sim.run_n(100))
        if cols[3].button('Run until end'):
            st.session_state.trace.extend(sim.run_n(DEFAULT_RUN_LIMIT))
        if cols[4].button('Reset'):
            sim.reset()
            st.session_state.trace = []
            st.success('Simulator reset')

        st.write('---')
        st.write(f'PC = 0x{sim.state.pc:08x}  | Steps executed: {sim.step_count}  | Halted: {sim.halted}')
        if sim.fault is not None:
            st.error(f'{sim.fault.kind}: {sim.fault}')

st.subheader('Execution Trace')
if st.session_state.trace:
    for t in st.session_state.trace[-20:]:
        with st.expander(f"Step {t.get('step', '?')}  PC=0x{t.get('pc', 0):08x}  [{t['status']}]", expanded=False):
            dec = t.get('decoded')
            st.write(format_decoded(dec) if dec else 'N/A')
            if 'fault' in t:
                st.error(t['fault'])
            if 'mem_access' in t:
                st.write('Memory access:', t['mem_access'])
            regsnz = {f'${i}': v for i, v in enumerate(t.get('regs_snapshot', [])) if v != 0}
            if regsnz:
                st.write('Registers (non-zero):')
                st.write(regsnz)
else:
    st.info('No execution steps yet. Use step/run controls.')

st.subheader('Registers')
if st.session_state.sim is not None:
    state = st.session_state.sim.state
    regs = state.registers
    reg_table = []
    for i in range(0, 32, 4):
        row = {}
        for j in range(4):
            row[f'r{j}'] = f'${i + j}'
            row[f'v{j}'] = f'0x{regs[i + j]:08x}'
        reg_table.append(row)
    st.table(reg_table)
    st.write(f'HI = 0x{state.hi:08x}  | LO = 0x{state.lo:08x}')
else:
    st.info('Simulator not initialized.')

st.subheader('Memory (non-zero words)')
if st.session_state.sim is not None:
    mem = st.session_state.sim.state.memory_words()
    if mem:
        st.table([{'addr': f'0x{a:08x}', 'value': f'0x{v:08x}', 'signed': to_signed64(v)} for a, v in mem.items()])
    else:
        st.info('Memory empty')

st.markdown('---')
st.caption('Words are loaded at byte address 4*index and executed from pc=0. '
           'Data memory is big-endian and byte-addressed; $zero is hard-wired to 0. '
           'Division by zero, undefined opcodes and jumps outside the program halt the simulator.')
