from typing import Any, Dict, Union

import msgpack
import orjson


class MessageCodec:
    """Encodes seat channel frames as MessagePack (binary) or JSON (text).

    Decoding picks the format from the frame type, so one socket may mix both.
    """

    @staticmethod
    def encode_message(*, data: Dict[str, Any], use_binary: bool = True) -> Union[str, bytes]:
        if use_binary:
            return msgpack.packb(data, use_bin_type=True)  # type: ignore[return-value]
        return orjson.dumps(data).decode()

    @staticmethod
    def decode_message(*, raw_data: Union[str, bytes]) -> Dict[str, Any]:
        try:
            if isinstance(raw_data, bytes):
                message = msgpack.unpackb(raw_data, raw=False)
            else:
                message = orjson.loads(raw_data)
        except (msgpack.UnpackException, ValueError) as e:
            raise ValueError(f'Failed to decode message: {e}') from e

        if not isinstance(message, dict):
            raise ValueError('Message must be an object')
        return message
