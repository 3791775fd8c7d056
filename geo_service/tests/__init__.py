# Copyright 2023-present Kensho Technologies, LLC.
