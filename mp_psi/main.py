import logging

from mp_psi.config import load_config
from mp_psi.data_generator import generate_sets
from mp_psi.hashing import BinHash
from mp_psi.messages import bandwidth_report, decode_message, encode_message
from mp_psi.party_a import state0, state2, state4
from mp_psi.party_b import state1, state3
from mp_psi.runtime import initialize

logger = logging.getLogger(__name__)


def setup_logging(level="INFO"):
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def run_demo(config=None):
    """
    Полный обмен в одном процессе: сообщения передаются как байты,
    A получает пересечение своих элементов с элементами B.
    """
    runtime = initialize(config)
    config = runtime.config

    # 1. генерим данные и кодируем их в корзины
    sender_set, receiver_set = generate_sets(
        config.sender_size, config.receiver_size, config.intersection_size
    )
    hasher = BinHash(config.bin_count, config.hash_seeds)
    vector_a = hasher.encode(receiver_set)
    vector_b = hasher.encode(sender_set)

    # 2. «обмен» байтами
    out_a0 = state0()
    wire1 = encode_message(out_a0.message)

    out_b1 = state1(wire1, vector_b)
    wire2 = encode_message(out_b1.message)

    out_a2 = state2(out_a0.private_state, out_a0.public_state, wire2, vector_a)
    wire3 = encode_message(out_a2.message)

    wire4 = encode_message(state3(out_b1.private_state, out_b1.public_state, wire3))

    result = state4(out_a2.public_state, wire4, out_a2.private_state)

    # 3. A восстанавливает свои элементы по корзинам пересечения
    intersection = set(hasher.matches(result, receiver_set))
    expected = set(sender_set) & set(receiver_set)

    messages = [decode_message(wire) for wire in (wire1, wire2, wire3, wire4)]
    bandwidth = bandwidth_report(messages)
    for kind, sizes in bandwidth.items():
        logger.info("%s: %d байт (полезная нагрузка %d)", kind, sizes["serialized"], sizes["payload"])

    return {
        "result": result,
        "intersection": intersection,
        "expected": expected,
        "false_positives": intersection - expected,
        "bandwidth": bandwidth,
    }


def main():
    config = load_config()
    setup_logging(config.log_level)
    report = run_demo(config)
    print("│∩│ =", len(report["intersection"]), "(ожидалось", len(report["expected"]), ")")


if __name__ == "__main__":
    main()
