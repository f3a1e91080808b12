import logging
import typing
import mido

logger = logging.getLogger(__name__)

def select_output_device(device_name: typing.Optional[str] = None) -> typing.Tuple[typing.Optional[str], typing.Optional[typing.Any]]:
    """
    Select and open a MIDI output device for the instrument.

    If `device_name` is provided, attempts to open that specific device.
    If `device_name` is None, auto-discovers available devices:
    - If exactly one device exists, it is selected automatically.
    - If multiple devices exist, the first is used and the choices are logged.
      This runs while the instrument loads in the background, so it never prompts.
    - If no devices exist, logs an error and returns None.

    Returns:
        A tuple of (device_name, midi_out_object) or (None, None) on failure.
    """
    try:
        outputs = mido.get_output_names()
        logger.info(f"Available MIDI outputs: {outputs}")

        if not outputs:
            logger.error("No MIDI output devices found.")
            return None, None

        if device_name is not None:
            if device_name in outputs:
                midi_out = mido.open_output(device_name)
                logger.info(f"Opened MIDI output: {device_name}")
                return device_name, midi_out
            else:
                logger.error(
                    f"MIDI output device '{device_name}' not found. "
                    f"Available devices: {outputs}"
                )
                return None, None

        selected_name = outputs[0]
        midi_out = mido.open_output(selected_name)

        if len(outputs) == 1:
            logger.info(f"One MIDI output found - using '{selected_name}'")
        else:
            logger.info(
                f"{len(outputs)} MIDI outputs found - using '{selected_name}'. "
                f"Pass --device (or midi.device_name in the config file) to choose another."
            )

        return selected_name, midi_out

    except Exception as e:
        logger.error(f"Failed to open MIDI output: {e}")
        return None, None
